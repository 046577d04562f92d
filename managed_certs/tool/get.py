"""managed-certs get action."""

import logging
from argparse import (
    ArgumentParser,
    _SubParsersAction as SubParsersAction,
)
from typing import cast, Any

from managed_certs.manifest import ManagedCertificate

from . import common
from .format import PrintFormatter, YamlFormatter

_LOGGER = logging.getLogger(__name__)


def status_row(mcert: ManagedCertificate) -> dict[str, Any]:
    """Return the columns describing a ManagedCertificate."""
    return {
        "namespace": mcert.namespace,
        "name": mcert.name,
        "status": mcert.status.certificate_status,
        "certificate": mcert.status.certificate_name,
        "domains": mcert.domains,
    }


class GetAction:
    """Get details about ManagedCertificates."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "get",
                help="Get ManagedCertificate objects",
                description="Print ManagedCertificates and their published status",
            ),
        )
        common.add_config_flags(args)
        args.add_argument(
            "--namespace",
            "-n",
            type=str,
            default=None,
            help="Only list ManagedCertificates in this namespace",
        )
        args.add_argument(
            "--output",
            "-o",
            choices=["yaml"],
            default=None,
            help="Output format of the command",
        )
        args.set_defaults(cls=cls)
        return args

    def run(  # type: ignore[no-untyped-def]
        self,
        namespace: str | None,
        output: str | None,
        **kwargs,
    ) -> None:
        """Action implementation."""
        config = common.build_config(**kwargs)
        resources = common.build_resources(config)
        mcerts = resources.list(namespace)
        if output == "yaml":
            YamlFormatter().print([mcert.to_doc() for mcert in mcerts])
            return
        if not mcerts:
            print("no ManagedCertificates found")
            return
        PrintFormatter().print([status_row(mcert) for mcert in mcerts])
