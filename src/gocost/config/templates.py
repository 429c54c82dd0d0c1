"""Templates for generated gocost configuration files."""

DEFAULT_CONFIG = """# gocost configuration example (paths relative to the analysed root)
include:
  - "."
exclude:
  - "vendor"
  - "testdata"
  - ".git"
include_tests: true
max_files: 1000

# Inlining-candidate rule for the Markdown report: fewer than inline_budget
# nodes and at most max_func_calls real calls.
inline_budget: 80
max_func_calls: 1
only_inlineable: false
show_noinline: false

# Report format: json or md
format: json
"""

MINIMAL_CONFIG = """# gocost minimal configuration
exclude:
  - "vendor"
"""

INLINING_CONFIG = """# gocost configuration for reviewing inlining candidates
exclude:
  - "vendor"
  - "testdata"
include_tests: false
inline_budget: 80
max_func_calls: 1
only_inlineable: true
show_noinline: false
format: md
"""

CONFIG_PRESETS = {
    "full": DEFAULT_CONFIG,
    "minimal": MINIMAL_CONFIG,
    "inlining": INLINING_CONFIG,
}
