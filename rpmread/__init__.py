"""Read rpm package files: headers, tags, files, dependencies, versions and signatures."""

__version__ = "0.1.0"