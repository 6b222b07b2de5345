#!/usr/bin/env python3
"""ZWave Bridge - a CLI for the bridge (listen to a controller, decode a capture)."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any, Final, TextIO

import click
import voluptuous as vol

from zwave_bridge import ApplicationEvent, DedupFilter, EventPayloadInvalid, Gateway
from zwave_bridge.notifier import (
    DEFAULT_BROKER_URL,
    DEFAULT_PROCEDURE,
    DEFAULT_TARGET_PREFIX,
)
from zwave_bridge.schemas import (
    SZ_BROKER_URL,
    SZ_CONFIG,
    SZ_ENABLED,
    SZ_HOST_ID,
    SZ_NOTIFIER,
    SZ_PROCEDURE,
    SZ_TARGET_PREFIX,
)
from zwave_tx import SZ_APPLICATION_COMMAND_HANDLER, DataFrame, FrameReader
from zwave_tx.const import DEFAULT_RECONNECT_DELAY, SZ_PORT_NAME
from zwave_tx.schemas import (
    SZ_ACK_PER_FRAME,
    SZ_DISABLE_SENDING,
    SZ_RECONNECT_DELAY,
    SZ_VERIFY_CHECKSUM,
)

_LOGGER = logging.getLogger(__name__)

DEFAULT_LOG_FORMAT: Final = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

SZ_DEBUG: Final = "debug"
SZ_DECODE: Final = "decode"
SZ_DURATION: Final = "duration"
SZ_LISTEN: Final = "listen"

CONTEXT_SETTINGS: Final = {"help_option_names": ["-h", "--help"]}


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("-z", "--debug", is_flag=True, help="enable debug logging")
@click.pass_context
def cli(ctx: click.Context, debug: bool = False) -> None:
    """A CLI for the zwave_bridge library."""
    ctx.obj = {SZ_DEBUG: debug}


@cli.command(name=SZ_LISTEN)
@click.argument("port-name")
@click.option(
    "-b",
    "--broker-url",
    default=DEFAULT_BROKER_URL,
    show_default=True,
    help="the MQTT broker of the downstream service",
)
@click.option(
    "-p",
    "--target-prefix",
    default=DEFAULT_TARGET_PREFIX,
    show_default=True,
    help="prefix of the target name",
)
@click.option("-H", "--host-id", help="target host id [default: hostname]")
@click.option(
    "-P", "--procedure", default=DEFAULT_PROCEDURE, show_default=True, help="method"
)
@click.option("-n", "--no-notify", is_flag=True, help="don't notify the service")
@click.option("-c", "--verify-checksum", is_flag=True, help="drop invalid frames")
@click.option("-a", "--ack-per-frame", is_flag=True, help="ACK each frame, not batch")
@click.option("-l", "--listen-only", is_flag=True, help="disable sending (no ACKs)")
@click.option(
    "-r",
    "--reconnect-delay",
    type=float,
    default=DEFAULT_RECONNECT_DELAY,
    show_default=True,
    help="seconds between reconnection attempts",
)
@click.option("-d", "--duration", type=float, help="seconds to run [default: forever]")
@click.pass_obj
def listen(
    obj: dict[str, Any], port_name: str, **kwargs: Any
) -> tuple[str, dict[str, Any], dict[str, Any]]:
    """Listen to a controller, and notify the service of its (new) events."""

    lib_kwargs: dict[str, Any] = {
        SZ_CONFIG: {
            SZ_DISABLE_SENDING: kwargs.pop("listen_only"),
            SZ_VERIFY_CHECKSUM: kwargs.pop("verify_checksum"),
            SZ_ACK_PER_FRAME: kwargs.pop("ack_per_frame"),
            SZ_RECONNECT_DELAY: kwargs.pop("reconnect_delay"),
        },
        SZ_NOTIFIER: {
            SZ_ENABLED: not kwargs.pop("no_notify"),
            SZ_BROKER_URL: kwargs.pop("broker_url"),
            SZ_TARGET_PREFIX: kwargs.pop("target_prefix"),
            SZ_HOST_ID: kwargs.pop("host_id"),
            SZ_PROCEDURE: kwargs.pop("procedure"),
        },
    }

    return SZ_LISTEN, lib_kwargs, {SZ_PORT_NAME: port_name, **obj, **kwargs}


@cli.command(name=SZ_DECODE)
@click.argument("input-file", type=click.File("r"), default="-")
@click.option("-c", "--verify-checksum", is_flag=True, help="drop invalid frames")
def decode(input_file: TextIO, verify_checksum: bool = False) -> int:
    """Decode a capture of the serial port (hex bytes, one chunk per line)."""

    reader = FrameReader(verify_checksum=verify_checksum)
    dedup = DedupFilter()

    for line in input_file:
        if not (chunk := line.split("#")[0].strip()):
            continue

        try:
            data = bytes.fromhex(chunk)
        except ValueError:
            click.echo(f"Invalid chunk (not hex): {chunk}", err=True)
            continue

        for frame in reader.feed(data):
            click.echo(repr(frame))

            if not isinstance(frame, DataFrame):
                continue
            if frame.name != SZ_APPLICATION_COMMAND_HANDLER:
                continue

            try:
                event = ApplicationEvent.from_frame(frame)
            except EventPayloadInvalid as err:
                click.echo(f"  {err}", err=True)
                continue

            click.echo(f"  {event}{'' if dedup.accept(event) else ' (duplicate)'}")

    if reader.pending:
        click.echo(f"Incomplete frame: {reader.pending.hex(' ')}", err=True)
        return 1
    return 0


def print_event(event: ApplicationEvent) -> None:
    click.secho(f"Event: {event}", fg="green")


async def async_main(command: str, lib_kwargs: dict[str, Any], **kwargs: Any) -> None:
    """Run the gateway until cancelled (or for the duration, if one was given)."""

    gwy = Gateway(kwargs[SZ_PORT_NAME], **lib_kwargs)
    gwy.add_event_handler(print_event)

    try:
        await gwy.start()

        if (duration := kwargs.get(SZ_DURATION)) is None:
            await asyncio.Event().wait()
        else:
            await asyncio.sleep(duration)

    finally:
        await gwy.stop()


def main() -> None:
    try:
        result = cli(standalone_mode=False)
    except click.exceptions.ClickException as err:
        err.show()
        sys.exit(err.exit_code)

    if isinstance(result, int):  # e.g. decode, or -h/--help (None)
        sys.exit(result)
    if result is None:
        sys.exit(0)

    command, lib_kwargs, kwargs = result

    logging.basicConfig(
        level=logging.DEBUG if kwargs.get(SZ_DEBUG) else logging.INFO,
        format=DEFAULT_LOG_FORMAT,
    )

    print(" - starting client...")
    try:
        asyncio.run(async_main(command, lib_kwargs, **kwargs))
    except vol.Invalid as err:
        print(f"\nInvalid configuration: {err}")
        sys.exit(2)
    except KeyboardInterrupt:
        print(" - exiting via keyboard interrupt")
    else:
        print(" - exiting")


if __name__ == "__main__":
    main()
