"""Starter .diffweight.toml templates."""

DEFAULT_TOML = """\
# diffweight configuration

[classification]
test_features = ["test-utils", "testing", "mock"]   # cfg(feature = ...) names treated as test code
test_paths = ["tests/", "benches/", "examples/"]
ignore_paths = []                                   # e.g. ["generated/", "vendor/"]

[weights]
public_function = 3
private_function = 1
public_struct = 3      # structs and enums
private_struct = 1
impl_block = 2
trait_definition = 4
const_static = 1       # const, static, type alias, module

[limits]
max_prod_units = 30
max_weighted_score = 100
# max_prod_lines = 200
fail_on_exceed = true

[output]
format = "github"      # github | json | human | comment
include_details = true
"""

FULL_TOML = DEFAULT_TOML + """
# Optional per-kind caps on changed production units
[limits.per_type]
# functions = 20
# structs = 5
# enums = 5
# traits = 2
# impl_blocks = 5
# consts = 10
# statics = 2
# type_aliases = 5
# macros = 2
# modules = 3
"""
