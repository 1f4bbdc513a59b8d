"""
Entry point for running solr_lite as a module.

This allows the package to be executed with:
    python -m solr_lite
"""

from .main import main

if __name__ == "__main__":
    main()
