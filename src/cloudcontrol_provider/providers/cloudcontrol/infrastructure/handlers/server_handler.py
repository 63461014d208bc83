"""Server power operations."""

from cloudcontrol_provider.providers.cloudcontrol.infrastructure.handlers.base_handler import (
    CloudControlHandler,
)


class ServerHandler(CloudControlHandler):
    """Shuts down and starts servers, waiting for each change to complete."""

    def shutdown(self, server_id: str) -> None:
        """Gracefully shut down a server and wait until it has stopped."""
        self._logger.info("Shutting down server '%s'...", server_id)

        self._initiate_async_operation(
            f"Shut down server '{server_id}'",
            lambda: self.client.shutdown_server(server_id),
        )
        self._wait_for_server_change(server_id, "Shut down server")

        self._logger.info("Server '%s' shut down.", server_id)

    def start(self, server_id: str) -> None:
        """Start a server and wait until it is running."""
        self._logger.info("Starting server '%s'...", server_id)

        self._initiate_async_operation(
            f"Start server '{server_id}'",
            lambda: self.client.start_server(server_id),
        )
        self._wait_for_server_change(server_id, "Start server")

        self._logger.info("Server '%s' started.", server_id)
