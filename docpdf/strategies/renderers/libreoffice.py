"""LibreOffice renderer strategy.

Converts documents to PDF by running ``soffice`` in headless conversion
mode as a subprocess, then moves the produced file to the requested path.
"""

import asyncio
import contextlib
import logging
import os
import signal
import subprocess
import sys
import tempfile
import threading
from pathlib import Path

from docpdf.interfaces.document import DocumentOpenError
from docpdf.interfaces.renderer import (
    BaseRenderer,
    ConversionJob,
    ConversionState,
    RendererError,
    RendererExitError,
    RendererNotFoundError,
    RendererOutputMissingError,
    RendererTimeoutError,
)

logger = logging.getLogger(__name__)

# Well-known install locations, per platform family.
RENDERER_CANDIDATES: dict[str, tuple[str, ...]] = {
    "windows": (
        r"C:\Program Files\LibreOffice\program\soffice.exe",
        r"C:\Program Files (x86)\LibreOffice\program\soffice.exe",
        r"C:\Program Files (x86)\LibreOffice\program\soffice.com",
    ),
    "linux": (
        "/usr/bin/libreoffice",
        "/usr/bin/soffice",
        "/snap/bin/libreoffice",
    ),
    "macos": (
        "/Applications/LibreOffice.app/Contents/MacOS/soffice",
        "/opt/homebrew/bin/libreoffice",
    ),
}

# Seconds to wait for the pipes to close after the process group is killed.
KILL_DRAIN_SECONDS = 5.0

# soffice is started as the leader of its own process group so that a kill
# also reaches the soffice.bin child spawned by the launcher.
if os.name == "nt":
    POPEN_GROUP_OPTIONS: dict = {"creationflags": subprocess.CREATE_NEW_PROCESS_GROUP}
else:
    POPEN_GROUP_OPTIONS = {"start_new_session": True}


def kill_process_tree(process: subprocess.Popen) -> None:
    """Forcefully end a renderer process and every process it started."""
    if os.name == "nt":
        subprocess.run(
            ["taskkill", "/F", "/T", "/PID", str(process.pid)],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
        process.kill()
        return

    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


def platform_family(platform: str | None = None) -> str | None:
    """Map a ``sys.platform`` value to a key of RENDERER_CANDIDATES."""
    platform = platform or sys.platform
    if platform.startswith("win"):
        return "windows"
    if platform == "darwin":
        return "macos"
    if platform.startswith("linux"):
        return "linux"
    return None


class LibreOfficeRenderer(BaseRenderer):
    """Renders documents to PDF with a locally installed LibreOffice.

    A new ``soffice`` process is started for every conversion. The wait for
    it is blocking with a hard timeout, so it runs on a worker thread.
    """

    def __init__(
        self,
        timeout: float = 60.0,
        settle_delay: float = 0.5,
        executable_path: str | None = None,
        max_concurrent: int | None = None,
        platform: str | None = None,
        isolate_profile: bool = True,
    ) -> None:
        """Initialize the renderer.

        Args:
            timeout: Seconds to wait for the process before killing it.
            settle_delay: Seconds to wait before moving the produced file.
            executable_path: Explicit soffice path; disables discovery.
            max_concurrent: Upper bound on simultaneous soffice processes.
                None means unbounded.
            platform: Platform override for discovery (defaults to sys.platform).
            isolate_profile: Give every conversion its own throwaway user
                profile, so parallel runs never hand work to each other.
        """
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        if settle_delay < 0:
            raise ValueError("settle_delay must not be negative")
        if max_concurrent is not None and max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")

        self._timeout = timeout
        self._settle_delay = settle_delay
        self._executable_path = executable_path
        self._platform = platform
        self._isolate_profile = isolate_profile
        self._slots = threading.BoundedSemaphore(max_concurrent) if max_concurrent else None

    @property
    def timeout(self) -> float:
        return self._timeout

    def candidate_paths(self) -> tuple[str, ...]:
        """Return the well-known install paths for the current platform."""
        return RENDERER_CANDIDATES.get(platform_family(self._platform), ())

    def locate_executable(self) -> str:
        """Return the first existing soffice executable.

        A configured executable path takes precedence over the well-known
        locations and must exist.

        Raises:
            RendererNotFoundError: If no executable exists.
        """
        if self._executable_path:
            if os.path.isfile(self._executable_path):
                return self._executable_path
            raise RendererNotFoundError(
                f"Configured LibreOffice executable not found: {self._executable_path}"
            )

        for path in self.candidate_paths():
            if os.path.isfile(path):
                logger.info(f"Found LibreOffice at: {path}")
                return path

        raise RendererNotFoundError(
            "LibreOffice not found. Please install LibreOffice from https://www.libreoffice.org/"
        )

    @staticmethod
    def build_command(
        executable: str,
        input_path: str,
        output_dir: str,
        profile_dir: str | None = None,
    ) -> list[str]:
        command = [executable]
        if profile_dir is not None:
            command.append(f"-env:UserInstallation={Path(profile_dir).as_uri()}")
        return command + [
            "--headless",
            "--convert-to",
            "pdf",
            "--outdir",
            output_dir,
            input_path,
        ]

    async def convert_to_pdf(self, input_path: str, output_path: str) -> str:
        """Convert a document to PDF and move it to ``output_path``.

        Args:
            input_path: Path to the document to convert.
            output_path: Final location of the PDF.

        Returns:
            The final PDF path.

        Raises:
            DocumentOpenError: If the input document does not exist.
            RendererNotFoundError: If LibreOffice is not installed.
            RendererTimeoutError: If the process exceeds the timeout.
            RendererExitError: If the process exits with a non-zero code.
            RendererOutputMissingError: If no PDF was produced.
            RendererError: If the process cannot be started.
        """
        source = Path(input_path).resolve()
        if not source.is_file():
            raise DocumentOpenError(f"Input document not found: {input_path}")

        executable = self.locate_executable()

        target = Path(output_path).resolve()
        target.parent.mkdir(parents=True, exist_ok=True)

        job = ConversionJob(
            input_path=str(source),
            output_dir=str(target.parent),
            timeout=self._timeout,
        )

        try:
            await asyncio.to_thread(self._run, job, executable)
            await self._relocate_output(job, target)
        except RendererError as e:
            logger.error(f"PDF conversion error ({job.state.value}): {e}")
            raise

        return str(target)

    def _run(self, job: ConversionJob, executable: str) -> None:
        """Run soffice for one job, blocking until exit or timeout."""
        slot = self._slots if self._slots is not None else contextlib.nullcontext()
        with slot:
            if not self._isolate_profile:
                self._run_process(job, executable)
                return
            with tempfile.TemporaryDirectory(prefix="docpdf-lo-", ignore_cleanup_errors=True) as profile_dir:
                self._run_process(job, executable, profile_dir)

    def _run_process(self, job: ConversionJob, executable: str, profile_dir: str | None = None) -> None:
        command = self.build_command(executable, job.input_path, job.output_dir, profile_dir)
        logger.debug(f"Running: {' '.join(command)}")

        job.state = ConversionState.LAUNCHING
        try:
            process = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                **POPEN_GROUP_OPTIONS,
            )
        except OSError as e:
            job.state = ConversionState.CRASHED
            raise RendererError(f"Failed to start LibreOffice process: {e}") from e

        job.state = ConversionState.RUNNING
        try:
            _, stderr = process.communicate(timeout=job.timeout)
        except subprocess.TimeoutExpired:
            kill_process_tree(process)
            try:
                process.communicate(timeout=KILL_DRAIN_SECONDS)
            except subprocess.TimeoutExpired:
                logger.warning(f"LibreOffice pipes still open {KILL_DRAIN_SECONDS:g}s after kill (pid {process.pid})")
            job.state = ConversionState.TIMED_OUT
            raise RendererTimeoutError(job.timeout) from None

        job.exit_code = process.returncode
        job.stderr = (stderr or b"").decode("utf-8", "ignore").strip()

        if job.exit_code != 0:
            job.state = ConversionState.FAILED
            raise RendererExitError(job.exit_code, job.stderr)

        job.state = ConversionState.SUCCEEDED
        logger.info("LibreOffice conversion completed successfully")

    async def _relocate_output(self, job: ConversionJob, target: Path) -> None:
        """Move ``<outdir>/<input stem>.pdf`` to the requested target."""
        job.state = ConversionState.LOCATING_OUTPUT
        produced = Path(job.output_dir) / f"{Path(job.input_path).stem}.pdf"

        if not produced.is_file():
            job.state = ConversionState.OUTPUT_MISSING
            raise RendererOutputMissingError(str(produced))

        # soffice may still be closing the file when the process exits.
        if self._settle_delay:
            await asyncio.sleep(self._settle_delay)

        if produced != target:
            os.replace(produced, target)
            logger.info(f"PDF moved to final location: {target}")

        job.state = ConversionState.RELOCATED
