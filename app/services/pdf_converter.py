"""PDF-to-text conversion through the external ``pdftotext`` executable."""

import asyncio
import logging
import os
import tempfile

from app.errors import CollaboratorFailure

logger = logging.getLogger(__name__)

_CHECK_PDF_HINT = (
    "Verifique se o arquivo não está protegido e se não é apenas imagem (PDF escaneado)."
)


class PdfToTextConverter:
    """Runs ``pdftotext -layout`` once per PDF.

    Input and output live in a private temporary directory that is removed
    on every exit path, including tool failure and timeout.
    """

    def __init__(self, binary: str = "pdftotext", timeout: float = 30.0) -> None:
        self.binary = binary
        self.timeout = timeout

    async def convert(self, pdf_bytes: bytes) -> str:
        with tempfile.TemporaryDirectory(prefix="pdf-extract-") as workdir:
            pdf_path = os.path.join(workdir, "input.pdf")
            txt_path = os.path.join(workdir, "output.txt")
            with open(pdf_path, "wb") as fh:
                fh.write(pdf_bytes)

            await self._run(pdf_path, txt_path)

            try:
                with open(txt_path, encoding="utf-8", errors="replace") as fh:
                    text = fh.read()
            except FileNotFoundError as exc:
                raise CollaboratorFailure(
                    f"Erro ao extrair texto do PDF: nenhum texto gerado. {_CHECK_PDF_HINT}",
                    cause=exc,
                )

        if not text.strip():
            raise CollaboratorFailure(
                f"Erro ao extrair texto do PDF: o arquivo não contém texto. {_CHECK_PDF_HINT}"
            )
        return text

    async def _run(self, pdf_path: str, txt_path: str) -> None:
        try:
            process = await asyncio.create_subprocess_exec(
                self.binary,
                "-layout",
                pdf_path,
                txt_path,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            logger.error("Could not start %s: %s", self.binary, exc)
            raise CollaboratorFailure(
                "Erro ao extrair texto do PDF: ferramenta de conversão indisponível.",
                cause=exc,
            )

        try:
            _, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            process.kill()
            await process.wait()
            logger.error("%s timed out after %ss", self.binary, self.timeout)
            raise CollaboratorFailure(
                f"Erro ao extrair texto do PDF: tempo limite excedido. {_CHECK_PDF_HINT}",
                cause=exc,
            )

        if process.returncode != 0:
            logger.error(
                "%s exited with code %s: %s",
                self.binary,
                process.returncode,
                stderr.decode(errors="replace").strip(),
            )
            raise CollaboratorFailure(
                f"Erro ao extrair texto do PDF: pdftotext falhou com código "
                f"{process.returncode}. {_CHECK_PDF_HINT}"
            )
