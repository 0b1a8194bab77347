"""
Entry point for running solr_schema_deployer as a module.

This allows the package to be executed with:
    python -m solr_schema_deployer
"""

from .main import main

if __name__ == "__main__":
    main()
