from enum import Enum


class OutputFormat(Enum):
    """Image formats the PlantUML server can render.

    The value is used both as the URL path segment and as the file extension
    of the rendered image.
    """

    ASCII = "txt"
    PNG = "png"
    SVG = "svg"

    @property
    def segment(self) -> str:
        return self.value

    @property
    def extension(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> "OutputFormat":
        """Parse a format name, ignoring case.

        Accepts "ascii" and "txt" for ASCII art output.

        Raises:
            ValueError: If the name is not a known format
        """
        try:
            return _FORMAT_NAMES[name.strip().lower()]
        except KeyError:
            raise ValueError(f"Unknown output format: {name!r}") from None

    def __str__(self) -> str:
        return self.value


_FORMAT_NAMES = {
    "ascii": OutputFormat.ASCII,
    "txt": OutputFormat.ASCII,
    "png": OutputFormat.PNG,
    "svg": OutputFormat.SVG,
}

FORMAT_NAMES = tuple(_FORMAT_NAMES)
