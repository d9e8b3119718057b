"""Shared test fixtures — sample diffs, Rust sources, temp crates."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Callable, Dict

import pytest

from diffweight.config.schema import DiffWeightConfig


LIB_RS = textwrap.dedent("""\
    pub fn add(a: i32, b: i32) -> i32 {
        a + b
    }

    fn helper() -> i32 {
        1
    }

    pub struct Point {
        x: i32,
    }

    impl Point {
        pub fn new(x: i32) -> Self {
            Point { x }
        }
    }

    #[cfg(test)]
    mod tests {
        use super::*;

        #[test]
        fn it_adds() {
            assert_eq!(add(1, 2), 3);
        }
    }
""")


MATH_RS = textwrap.dedent("""\
    /// Doubles a value.
    pub fn double(x: i32) -> i32 {
        x * 2
    }
""")


@pytest.fixture
def config() -> DiffWeightConfig:
    return DiffWeightConfig()


@pytest.fixture
def lib_rs() -> str:
    return LIB_RS


@pytest.fixture
def reader_for() -> Callable[[Dict[str, str]], Callable[[str], str]]:
    """Build an in-memory file reader from a ``{path: content}`` mapping."""

    def _make(files: Dict[str, str]) -> Callable[[str], str]:
        def _read(path: str) -> str:
            try:
                return files[path]
            except KeyError:
                raise FileNotFoundError(path) from None

        return _read

    return _make


@pytest.fixture
def rust_crate(tmp_path: Path) -> Path:
    """A temporary crate with ``src/lib.rs`` and ``src/math.rs``."""
    src = tmp_path / "src"
    src.mkdir()
    (src / "lib.rs").write_text(LIB_RS, encoding="utf-8")
    (src / "math.rs").write_text(MATH_RS, encoding="utf-8")
    return tmp_path


@pytest.fixture
def sample_diff_new_function() -> str:
    """Adds ``src/math.rs``: one documented public function, four lines."""
    return textwrap.dedent("""\
        diff --git a/src/math.rs b/src/math.rs
        new file mode 100644
        index 0000000..1234567
        --- /dev/null
        +++ b/src/math.rs
        @@ -0,0 +1,4 @@
        +/// Doubles a value.
        +pub fn double(x: i32) -> i32 {
        +    x * 2
        +}
    """)


@pytest.fixture
def sample_diff_lib_edit() -> str:
    """Touches ``add`` (one added line) and ``helper`` (one replaced line)."""
    return textwrap.dedent("""\
        diff --git a/src/lib.rs b/src/lib.rs
        index 1111111..2222222 100644
        --- a/src/lib.rs
        +++ b/src/lib.rs
        @@ -2,0 +2,1 @@
        +    a + b
        @@ -6,1 +6,1 @@
        -    0
        +    1
    """)


@pytest.fixture
def sample_diff_test_edit() -> str:
    """Touches only the body of the ``#[test]`` function in ``src/lib.rs``."""
    return textwrap.dedent("""\
        diff --git a/src/lib.rs b/src/lib.rs
        index 1111111..2222222 100644
        --- a/src/lib.rs
        +++ b/src/lib.rs
        @@ -25,1 +25,1 @@
        -        assert_eq!(add(2, 2), 4);
        +        assert_eq!(add(1, 2), 3);
    """)


@pytest.fixture
def sample_diff_mixed_files() -> str:
    """One Rust file plus a README and a generated file."""
    return textwrap.dedent("""\
        diff --git a/README.md b/README.md
        index 1111111..2222222 100644
        --- a/README.md
        +++ b/README.md
        @@ -1,1 +1,2 @@
         # crate
        +More docs.
        diff --git a/src/generated/bindings.rs b/src/generated/bindings.rs
        index 1111111..2222222 100644
        --- a/src/generated/bindings.rs
        +++ b/src/generated/bindings.rs
        @@ -1,0 +1,1 @@
        +pub fn ffi() {}
        diff --git a/src/math.rs b/src/math.rs
        new file mode 100644
        index 0000000..1234567
        --- /dev/null
        +++ b/src/math.rs
        @@ -0,0 +1,4 @@
        +/// Doubles a value.
        +pub fn double(x: i32) -> i32 {
        +    x * 2
        +}
    """)


@pytest.fixture
def sample_diff_rename() -> str:
    """A diff with a renamed file."""
    return textwrap.dedent("""\
        diff --git a/src/old_name.rs b/src/new_name.rs
        similarity index 97%
        rename from src/old_name.rs
        rename to src/new_name.rs
        index abc1234..def5678 100644
        --- a/src/old_name.rs
        +++ b/src/new_name.rs
        @@ -1,0 +2,1 @@
        +// New line added after rename
    """)


@pytest.fixture
def sample_diff_binary() -> str:
    """A diff with a binary file and no hunks."""
    return textwrap.dedent("""\
        diff --git a/logo.png b/logo.png
        new file mode 100644
        Binary files /dev/null and b/logo.png differ
    """)


@pytest.fixture
def sample_diff_no_newline() -> str:
    """A diff with 'No newline at end of file' marker."""
    return textwrap.dedent("""\
        diff --git a/src/lib.rs b/src/lib.rs
        index 1111111..2222222 100644
        --- a/src/lib.rs
        +++ b/src/lib.rs
        @@ -3 +3 @@
        -}
        \\ No newline at end of file
        +}
    """)


@pytest.fixture
def math_rs() -> str:
    return MATH_RS


@pytest.fixture
def crate_files() -> Dict[str, str]:
    """Contents of the sample crate, keyed by diff path."""
    return {"src/lib.rs": LIB_RS, "src/math.rs": MATH_RS}


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep DIFFWEIGHT_* variables from the outer environment out of tests."""
    for name in (
        "DIFFWEIGHT_FORMAT",
        "DIFFWEIGHT_MAX_UNITS",
        "DIFFWEIGHT_MAX_SCORE",
        "DIFFWEIGHT_MAX_LINES",
        "DIFFWEIGHT_IGNORE_PATHS",
    ):
        monkeypatch.delenv(name, raising=False)
