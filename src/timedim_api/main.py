"""Time dimension API.

Serves the ``time-dimension`` process over HTTP. The same process is
available as a pygeoapi plugin in
``timedim_api.plugins.processes.time_dimension``.
"""

import timedim_api.startup  # noqa: F401

from fastapi import FastAPI  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from timedim_api.routers import processes, root  # noqa: E402

app = FastAPI(title="Time dimension API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(root.router)
app.include_router(processes.router)
