from __future__ import annotations

from gedcom_io.core.context import RewriteContext
from gedcom_io.core.exceptions import GedcomError, PipelineError
from gedcom_io.core.header import stamp_header
from gedcom_io.loader.tree_builder import GEDCOMTree
from gedcom_io.parser_core import GEDCOMParser


class Pipeline:
    """
    Orchestrates read -> optional conversion -> write.
    No parsing logic lives here.
    """

    def __init__(self, context: RewriteContext):
        self.ctx = context
        self.log = context.logger
        self.parser = GEDCOMParser(config=context.config)

    def read(self) -> GEDCOMTree:
        tree = self.parser.read(
            self.ctx.input_path,
            charset=self.ctx.charset,
            normalize=self.ctx.normalize,
        )
        self.ctx.stats["input_charset"] = tree.charset
        self.ctx.stats["records"] = len(tree.records)
        return tree

    def run(self) -> bytes:
        """
        Rewrite the input document.

        Returns:
            The encoded output, which is also written to ``output_path`` if set.

        Raises:
            GedcomError subclasses unchanged (read and write problems stay
            distinguishable); anything else wrapped in PipelineError.
        """
        self.log.info("Pipeline starting")

        try:
            tree = self.read()

            if self.ctx.to_utf8:
                tree.set_charset("utf-8")
            if self.ctx.timestamp and not stamp_header(tree):
                self.log.warning("No HEAD record; timestamp not written")

            data = self.parser.to_bytes(
                tree,
                max_width=self.ctx.width,
                wrap=self.ctx.normalize,
            )
            if self.ctx.output_path:
                with open(self.ctx.output_path, "wb") as out:
                    out.write(data)

            self.ctx.stats["output_charset"] = tree.charset
            self.ctx.stats["bytes"] = len(data)
            self.log.info("Pipeline completed successfully")

            return data

        except GedcomError:
            self.log.exception("Pipeline execution failed")
            raise
        except Exception as exc:
            self.log.exception("Pipeline execution failed")
            raise PipelineError(str(exc)) from exc
