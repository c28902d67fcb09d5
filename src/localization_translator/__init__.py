"""
Localization Translator Package.

This package provides a caching client for a remote text-translation API
and the tooling to translate hierarchical localization files with it.
Repeated requests are served from a persistent cache keyed by a request
fingerprint, and only keys missing from an existing target file are sent
for translation.

Modules:
    config: Configuration settings and logging setup.
    core: Fingerprinting, error taxonomy and database connections.
    translation: Cache store, remote gateway, cache-aware translator,
        placeholder segmenter, tree merge and on-the-fly translation.
    files: Reading and writing JSON and YAML localization files.
    utils: Usage reporting helpers.

License: MIT
"""

__version__ = "1.0.0"
