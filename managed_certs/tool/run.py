"""managed-certs run action."""

import logging
from argparse import (
    ArgumentParser,
    _SubParsersAction as SubParsersAction,
)
import signal
import threading
from types import FrameType
from typing import cast

from managed_certs.controller import Controller, Reconciler
from managed_certs.exceptions import ManagedCertsException
from managed_certs.resources import ResourceReader
from managed_certs.runtime import handle_error
from managed_certs.workqueue import ExponentialFailureRateLimiter, RateLimitingQueue

from . import common

_LOGGER = logging.getLogger(__name__)

QUEUE_NAME = "managed-certificates"


class RunAction:
    """Run the controller until interrupted."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "run",
                help="Run the ManagedCertificate controller",
                description=(
                    "Reconcile ManagedCertificate resources with SslCertificates "
                    "until interrupted"
                ),
            ),
        )
        common.add_config_flags(args)
        common.add_controller_flags(args)
        args.set_defaults(cls=cls)
        return args

    def run(  # type: ignore[no-untyped-def]
        self,
        **kwargs,
    ) -> None:
        """Action implementation."""
        config = common.build_config(**kwargs)
        config.validate()

        resources = common.build_resources(config)
        ssl_client = common.build_ssl_client(config)
        state = common.build_state(config)

        retry = config.controller.retry
        queue = RateLimitingQueue(
            ExponentialFailureRateLimiter(retry.base_delay, retry.max_delay),
            name=QUEUE_NAME,
        )
        controller = Controller(
            queue,
            Reconciler(resources, resources, ssl_client, state),
            config.controller,
        )

        stop = threading.Event()

        def on_signal(signum: int, frame: FrameType | None) -> None:
            _LOGGER.info(
                "Received signal %s, shutting down", signal.Signals(signum).name
            )
            stop.set()

        signal.signal(signal.SIGINT, on_signal)
        signal.signal(signal.SIGTERM, on_signal)

        controller.start()
        try:
            run_resync_loop(
                controller, resources, config.controller.resync_interval, stop
            )
        finally:
            controller.shutdown()


def run_resync_loop(
    controller: Controller,
    reader: ResourceReader,
    interval: float,
    stop: threading.Event,
) -> None:
    """Enqueue every resource each interval until stopped."""
    while not stop.is_set():
        try:
            controller.resync(reader)
        except ManagedCertsException as err:
            handle_error(err)
        stop.wait(interval)
