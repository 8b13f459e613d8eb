"""
Package Matrix Validator - install and smoke-test a native package on a
matrix of Linux distributions and CPU architectures.

Each (distribution, architecture) pair runs in its own container; a
bounded scheduler runs them in parallel and aggregates the results.

Main entry points:
    - package_matrix_validator.main: CLI entrypoint
    - package_matrix_validator.core.runner: run_all() for a full run
    - package_matrix_validator.models.config: Config and load_env()
"""
