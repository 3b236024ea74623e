"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy Store initialization, service
dispatch with the default tenant and actor, and centralized result
emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from relcore.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from collections.abc import Callable

    from relcore.config.settings import RelSettings
    from relcore.infrastructure.store import Store
    from relcore.services.base import BaseService
    from relcore.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``. The store is lazily
    initialized on first use so ``--help`` and ``--version`` never
    trigger database access.
    """

    def __init__(self, settings: RelSettings) -> None:
        self.settings = settings
        self._store: Store | None = None

        from relcore.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from relcore.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def store(self) -> Store:
        """The store instance (created lazily on first access)."""
        if self._store is None:
            from relcore.infrastructure.store import Store

            self._store = Store(self.settings)
            self._store.init_event_bus(sync=self.settings.sync)
        return self._store

    def close(self) -> None:
        """Wait for in-flight side effects and release the store."""
        if self._store is not None:
            self._store.close()
            self._store = None

    def run(self, service_cls: type[BaseService], **fields: Any) -> ServiceResult:
        """Execute *service_cls* with the default ``--account``/``--author`` applied.

        Options left unset (None) are dropped so the Rule Validator
        reports them as missing rather than mistyped.
        """
        data: dict[str, Any] = {
            "account_id": self.settings.account_id,
            "author_id": self.settings.author_id,
        }
        data.update(fields)
        data = {key: value for key, value in data.items() if value is not None}
        return service_cls(self.store).run(data)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def invoke(
        self, op: str, func: Callable[..., dict[str, Any]], **kwargs: Any
    ) -> ServiceResult:
        """Call a non-kernel operation (registration) and wrap it as a ServiceResult."""
        from relcore.services.errors import ServiceFailure
        from relcore.services.result import ServiceResult

        try:
            data = func(self.store, **kwargs)
        except ServiceFailure as exc:
            return ServiceResult.failure(op, exc.to_error())
        return ServiceResult.success(op, data)
