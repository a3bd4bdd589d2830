"""
PlantUML Export.

Renders local PlantUML diagram files to images through a remote PlantUML
server and writes each image next to its source file.

## Modules:

- `puml_export.core`: Encoding, output paths, and the export pipeline.
- `puml_export.infrastructure`: Configuration, HTTP client, and log paths.
- `puml_export.cli`: The command line interface.
"""

__version__ = "0.1.0"
