"""Aggregates per-file invocations into a single rendered document."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Protocol, Sequence

from google.protobuf.descriptor_pb2 import FileDescriptorProto

from .builder import DocumentModelBuilder
from .config import GeneratorSettings, PluginOptions, parse_parameter
from .logging import get_logger
from .models import FileRecord
from .naming import TypeIndex
from .rendering import Renderer


class GeneratorHost(Protocol):
    """What the driver needs from the code generator host."""

    def parsed_files(self) -> Sequence[str]:
        """Names of every file of the run, in invocation order."""

    def proto_files(self) -> Iterable[FileDescriptorProto]:
        """Every descriptor known to the host, dependencies included."""

    def write(self, name: str, content: str) -> None:
        """Emit an output artifact."""


class RunState(enum.Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"
    RENDERED = "rendered"


@dataclass
class RunContext:
    """State of one generator run, created on the first invocation."""

    options: PluginOptions
    builder: DocumentModelBuilder
    files: List[FileRecord] = field(default_factory=list)


class DocGenerator:
    """Handles the one-call-per-file protocol and renders once, after the last file.

    The first call parses and freezes the plugin parameter; every call adds
    the current file's record to the run; the call for the last file of the
    host's list renders the whole set and writes the single output.
    """

    def __init__(
        self,
        *,
        settings: GeneratorSettings | None = None,
        renderer: Renderer | None = None,
    ) -> None:
        self.settings = settings
        self.renderer = renderer or Renderer(
            templates_dir=settings.templates_dir if settings else None
        )
        self.state = RunState.IDLE
        self.context: Optional[RunContext] = None
        self.logger = get_logger("driver")

    def generate(
        self, file_proto: FileDescriptorProto, parameter: str, host: GeneratorHost
    ) -> None:
        """Process one file of the run.

        Raises a ``DocGenError`` subclass on any failure; no output is
        written for a failed run.
        """
        if self.state is RunState.RENDERED:
            raise RuntimeError("documentation was already rendered for this run")

        parsed_files = list(host.parsed_files())
        context = self._context_for(parameter, host, len(parsed_files))
        record = context.builder.build_file(file_proto)
        if record is not None:
            context.files.append(record)

        if parsed_files and file_proto.name == parsed_files[-1]:
            self._finish_run(context, host)

    def _context_for(self, parameter: str, host: GeneratorHost, file_count: int) -> RunContext:
        if self.context is not None:
            return self.context
        context = self._start_run(parameter, host)
        self.context = context
        self.state = RunState.ACCUMULATING
        self.logger.info(
            "Documenting %d files to %s", file_count, context.options.output_file_name
        )
        return context

    def _start_run(self, parameter: str, host: GeneratorHost) -> RunContext:
        options = parse_parameter(parameter)
        self.logger.debug(
            "Parameter %r: template=%s no_exclude=%s",
            parameter,
            options.template_name,
            options.no_exclude,
        )
        index = TypeIndex.from_files(host.proto_files())
        self.logger.debug("Indexed %d message and enum types", len(index))
        builder = DocumentModelBuilder(
            index,
            no_exclude=options.no_exclude,
            search_roots=self.settings.source_roots if self.settings else (),
        )
        return RunContext(options=options, builder=builder)

    def _finish_run(self, context: RunContext, host: GeneratorHost) -> None:
        content = self.renderer.render(context.files, context.options.template)
        host.write(context.options.output_file_name, content)
        self.state = RunState.RENDERED
        self.logger.info(
            "Wrote %s (%d files documented)",
            context.options.output_file_name,
            len(context.files),
        )


__all__ = ["DocGenerator", "GeneratorHost", "RunContext", "RunState"]
