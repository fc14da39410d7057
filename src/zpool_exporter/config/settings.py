import os


def _csv(value: str):
    return [item.strip() for item in value.split(",") if item.strip()]


class Config:
    bind_address = os.getenv("ZPOOL_EXPORTER_BIND_ADDRESS", "0.0.0.0")
    port = int(os.getenv("ZPOOL_EXPORTER_PORT", "8080"))
    log_level = os.getenv("ZPOOL_EXPORTER_LOG_LEVEL", "info")

    # External commands
    zpool_binary = os.getenv("ZPOOL_EXPORTER_ZPOOL_BINARY", "zpool")
    command_timeout = float(os.getenv("ZPOOL_EXPORTER_COMMAND_TIMEOUT", "30"))

    # Topology provider: "status" parses `zpool status`, "libzfs" uses py-libzfs
    topology_backend = os.getenv("ZPOOL_EXPORTER_TOPOLOGY_BACKEND", "status").lower()

    # Only export these pools, all pools when empty
    pools = _csv(os.getenv("ZPOOL_EXPORTER_POOLS", ""))

config = Config()
