"""Document editing interfaces.

Defines the abstract mutation API over word-processing packages and the
errors raised while opening or mutating them.
"""

from abc import ABC, abstractmethod


class BaseDocumentEditor(ABC):
    """Abstract base class for document mutation strategies.

    Each operation opens the document, applies its mutation in memory and
    saves it back to the same path once. A failure before the save leaves
    the file on disk unchanged.

    Example:
        ```python
        editor = DocxDocumentEditor()
        await editor.replace_variables("output/work.docx", {"{{Date}}": "2024-01-01"})
        names = await editor.list_bookmarks("output/work.docx")
        ```
    """

    @abstractmethod
    async def replace_variables(self, document_path: str, variables: dict[str, str]) -> None:
        """Replace every literal occurrence of each key in body, headers and footers.

        Args:
            document_path: Path to the document to mutate in place.
            variables: Mapping of placeholder text to replacement text.

        Raises:
            DocumentOpenError: If the document is missing or unreadable.
        """

    @abstractmethod
    async def replace_bookmark_text(
        self, document_path: str, bookmark_values: dict[str, str]
    ) -> list[str]:
        """Replace the content of named bookmarks with text.

        Args:
            document_path: Path to the document to mutate in place.
            bookmark_values: Mapping of bookmark name to replacement text.

        Returns:
            Names of the bookmarks that were replaced.

        Raises:
            DocumentOpenError: If the document is missing or unreadable.
            BookmarkNotFoundError: In strict mode, if a bookmark is absent.
        """

    @abstractmethod
    async def replace_image(self, document_path: str, bookmark_name: str, image_path: str) -> bool:
        """Replace the content of a bookmark with an embedded image.

        Args:
            document_path: Path to the document to mutate in place.
            bookmark_name: Name of the bookmark receiving the image.
            image_path: Path to a jpeg, png, gif or bmp file.

        Returns:
            True if the image was inserted, False if the bookmark was absent.

        Raises:
            UnsupportedImageFormatError: If the image extension is not supported.
            ImageFileMissingError: If the image file does not exist.
            DocumentOpenError: If the document is missing or unreadable.
            BookmarkNotFoundError: In strict mode, if the bookmark is absent.
        """

    @abstractmethod
    async def list_bookmarks(self, document_path: str) -> list[str]:
        """Return bookmark names in document order, skipping unnamed ones.

        Args:
            document_path: Path to the document to read.

        Raises:
            DocumentOpenError: If the document is missing or unreadable.
        """

    @property
    @abstractmethod
    def supported_extensions(self) -> set[str]:
        """Return supported file extensions."""


class DocumentError(Exception):
    """Base exception for document errors."""

    pass


class TemplateNotFoundError(DocumentError):
    """Raised when a requested template does not exist."""

    def __init__(self, template_name: str) -> None:
        self.template_name = template_name
        super().__init__(f"Template not found: {template_name}")


class DocumentOpenError(DocumentError):
    """Raised when a document package cannot be opened."""

    pass


class UnsupportedImageFormatError(DocumentError):
    """Raised when an image extension has no supported encoding."""

    def __init__(self, extension: str) -> None:
        self.extension = extension
        super().__init__(f"Image format not supported: {extension or '(none)'}")


class ImageFileMissingError(DocumentError):
    """Raised when the image to embed does not exist."""

    def __init__(self, image_path: str) -> None:
        self.image_path = image_path
        super().__init__(f"Image not found: {image_path}")


class BookmarkNotFoundError(DocumentError):
    """Raised in strict mode when a bookmark pair cannot be located."""

    def __init__(self, bookmark_name: str) -> None:
        self.bookmark_name = bookmark_name
        super().__init__(f"Bookmark not found: {bookmark_name}")
