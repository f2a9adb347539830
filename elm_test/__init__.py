"""elm-test - discovers, compiles and runs Elm test suites in parallel."""

__version__ = "0.19.1"
