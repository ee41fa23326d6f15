"""PDF renderer interfaces.

Defines the abstract base class for converting documents to PDF with an
external program, the conversion job record and the renderer errors.
"""

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass


class ConversionState(str, enum.Enum):
    """Lifecycle of a single conversion."""

    IDLE = "idle"
    LAUNCHING = "launching"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    TIMED_OUT = "timed_out"
    FAILED = "failed"
    CRASHED = "crashed"
    LOCATING_OUTPUT = "locating_output"
    RELOCATED = "relocated"
    OUTPUT_MISSING = "output_missing"


@dataclass
class ConversionJob:
    """External-process invocation record for one conversion.

    Attributes:
        input_path: Document handed to the renderer.
        output_dir: Directory the renderer writes into.
        timeout: Maximum seconds to wait for the process.
        state: Current lifecycle state.
        exit_code: Process exit code once it has exited.
        stderr: Captured standard error text.
    """

    input_path: str
    output_dir: str
    timeout: float
    state: ConversionState = ConversionState.IDLE
    exit_code: int | None = None
    stderr: str = ""

    @property
    def is_terminal(self) -> bool:
        return self.state in {
            ConversionState.TIMED_OUT,
            ConversionState.FAILED,
            ConversionState.CRASHED,
            ConversionState.RELOCATED,
            ConversionState.OUTPUT_MISSING,
        }


class BaseRenderer(ABC):
    """Abstract base class for PDF rendering strategies.

    Example:
        ```python
        renderer = LibreOfficeRenderer(timeout=60)
        pdf_path = await renderer.convert_to_pdf("output/work.docx", "output/work.pdf")
        ```
    """

    @abstractmethod
    async def convert_to_pdf(self, input_path: str, output_path: str) -> str:
        """Convert a document to PDF.

        Args:
            input_path: Path to the document to convert.
            output_path: Where the resulting PDF must end up.

        Returns:
            The path of the PDF file.

        Raises:
            RendererNotFoundError: If no renderer executable is installed.
            RendererTimeoutError: If the conversion exceeds the timeout.
            RendererExitError: If the renderer exits with a non-zero code.
            RendererOutputMissingError: If the expected output is absent.
        """

    @abstractmethod
    def locate_executable(self) -> str:
        """Return the path of the renderer executable.

        Raises:
            RendererNotFoundError: If no executable can be found.
        """

    def is_available(self) -> bool:
        """Check whether the renderer executable can be located."""
        try:
            self.locate_executable()
        except RendererNotFoundError:
            return False
        return True


class RendererError(Exception):
    """Base exception for renderer errors."""

    pass


class RendererNotFoundError(RendererError):
    """Raised when no renderer executable is installed."""

    pass


class RendererTimeoutError(RendererError):
    """Raised when the renderer does not exit within the timeout."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"LibreOffice conversion timed out after {timeout:g} seconds")


class RendererExitError(RendererError):
    """Raised when the renderer exits with a non-zero code."""

    def __init__(self, exit_code: int, stderr: str) -> None:
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(f"LibreOffice conversion failed with exit code {exit_code}: {stderr}")


class RendererOutputMissingError(RendererError):
    """Raised when the renderer exits cleanly but writes no output."""

    def __init__(self, expected_path: str) -> None:
        self.expected_path = expected_path
        super().__init__(f"Generated PDF not found at: {expected_path}")
