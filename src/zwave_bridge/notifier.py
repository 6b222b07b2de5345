#!/usr/bin/env python3
"""ZWave Bridge - notification of the downstream (home automation) service.

Each accepted event is published as a JSON-RPC 2.0 notification (i.e. no id, so
no response is expected), at QoS 0 (at most once)::

    topic:   <target_prefix><host_id>/<procedure>
    payload: {"jsonrpc": "2.0", "method": "<procedure>", "params": ["NNNSSS"]}

where NNN is the node id, and SSS the sub-node id, both zero-padded.
"""

from __future__ import annotations

import json
import logging
import socket
from typing import Any, Final
from urllib.parse import unquote, urlparse

from paho.mqtt import MQTTException, client as mqtt
from paho.mqtt.enums import CallbackAPIVersion

from .event import ApplicationEvent
from .exceptions import NotifierError

_LOGGER = logging.getLogger(__name__)

# NOTE: All debug flags should be False for deployment to end-users
_DBG_FORCE_NOTIFY_LOGGING: Final[bool] = False

DEFAULT_BROKER_URL: Final = "mqtt://localhost:1883"
DEFAULT_PROCEDURE: Final = "scene"
DEFAULT_TARGET_PREFIX: Final = "zwave/"

_MQTT_QOS: Final[int] = 0
_MQTT_KEEPALIVE: Final[int] = 60


class Notifier:
    """Publish events to the downstream service, fire-and-forget.

    There is no acknowledgement and no retry: a failure to publish is logged, and
    the event is lost. The MQTT client runs its own network thread, so publishing
    never blocks the event loop.
    """

    def __init__(
        self,
        broker_url: str = DEFAULT_BROKER_URL,
        /,
        *,
        target_prefix: str = DEFAULT_TARGET_PREFIX,
        host_id: str | None = None,
        procedure: str = DEFAULT_PROCEDURE,
        enabled: bool = True,
    ) -> None:
        self._broker_url = urlparse(broker_url)
        self._target = f"{target_prefix}{host_id or socket.gethostname()}"
        self._procedure = procedure

        self.enabled = enabled

        self.client: mqtt.Client | None = None  # None until self.start()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(topic={self.topic}, enabled={self.enabled})"

    @property
    def target(self) -> str:
        return self._target

    @property
    def procedure(self) -> str:
        return self._procedure

    @property
    def topic(self) -> str:
        return f"{self._target}/{self._procedure}"

    @staticmethod
    def format_action(event: ApplicationEvent) -> str:
        """Return the action string of an event, e.g. '002005'."""
        return f"{event.node:03d}{event.sub_node:03d}"

    def start(self) -> None:
        """Connect to the broker (in the background, reconnecting as required)."""
        if not self.enabled or self.client is not None:
            return

        client = mqtt.Client(
            protocol=mqtt.MQTTv5, callback_api_version=CallbackAPIVersion.VERSION2
        )
        client.on_connect = self._on_connect
        client.on_disconnect = self._on_disconnect

        if self._broker_url.username:
            client.username_pw_set(
                unquote(self._broker_url.username),
                unquote(self._broker_url.password or ""),
            )

        if self._broker_url.scheme == "mqtts":
            client.tls_set()
            default_port = 8883
        else:
            default_port = 1883

        try:
            client.connect_async(
                str(self._broker_url.hostname or "localhost"),
                self._broker_url.port or default_port,
                _MQTT_KEEPALIVE,
            )
            client.loop_start()
        except (ValueError, OSError, MQTTException) as err:
            _LOGGER.error("Failed to initiate MQTT connection: %s", err)
            return

        self.client = client

    def stop(self) -> None:
        """Disconnect from the broker (any unsent notifications are lost)."""
        if self.client is None:
            return

        client, self.client = self.client, None

        try:
            client.disconnect()
            client.loop_stop()
        except (ValueError, OSError, MQTTException) as err:
            _LOGGER.debug("Error during MQTT cleanup: %s", err)

    def notify(self, event: ApplicationEvent) -> bool:
        """Notify the downstream service of the event (a no-op if disabled).

        Returns True if the notification was handed to the MQTT client.
        """
        if not self.enabled:
            return False

        payload = json.dumps(
            {
                "jsonrpc": "2.0",
                "method": self._procedure,
                "params": [self.format_action(event)],
            }
        )

        if _DBG_FORCE_NOTIFY_LOGGING:
            _LOGGER.warning("Tx: %s %s", self.topic, payload)
        else:
            _LOGGER.info("Tx: %s %s", self.topic, payload)

        try:
            self._publish(payload)
        except NotifierError as err:
            _LOGGER.warning("%s < Failed to notify: %s", event, err)
            return False
        return True

    def _publish(self, payload: str) -> None:
        if self.client is None:
            raise NotifierError("The MQTT client has not been started")

        try:
            info = self.client.publish(self.topic, payload=payload, qos=_MQTT_QOS)
        except (ValueError, OSError, MQTTException) as err:
            raise NotifierError(f"MQTT publish failed: {err}") from err

        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise NotifierError(
                f"MQTT publish failed: {mqtt.error_string(info.rc)} (rc={info.rc})"
            )

    def _on_connect(
        self,
        client: mqtt.Client,
        userdata: Any,
        flags: Any,
        reason_code: Any,
        properties: Any | None,
    ) -> None:
        if reason_code.is_failure:
            _LOGGER.error("MQTT connection failed: %s", reason_code.getName())
            return
        _LOGGER.info("MQTT connected: %s", reason_code.getName())

    def _on_disconnect(
        self,
        client: mqtt.Client,
        userdata: Any,
        flags: Any,
        reason_code: Any,
        properties: Any | None,
    ) -> None:
        _LOGGER.warning("MQTT disconnected: %s", reason_code)
