from fastapi import FastAPI

from zpool_exporter.api.routers import metrics

app = FastAPI(
    title="zpool exporter",
    description="Prometheus metrics for ZFS pools, vdevs and disks.",
    version="0.1.0",
)

app.include_router(metrics.router)
