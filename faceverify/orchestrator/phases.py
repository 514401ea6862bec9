from typing import Literal

TaskName = Literal["verify", "analyze"]
PhaseName = Literal["idle", "capturing", "dispatching", "awaiting_response", "resolved"]

VERIFY = "verify"
ANALYZE = "analyze"
TASKS = (VERIFY, ANALYZE)

IDLE = "idle"
CAPTURING = "capturing"
DISPATCHING = "dispatching"
AWAITING_RESPONSE = "awaiting_response"
RESOLVED = "resolved"

# Phases in which a slot refuses a new capture
IN_FLIGHT = (CAPTURING, DISPATCHING, AWAITING_RESPONSE)

# Cycle: idle -> capturing -> dispatching -> awaiting_response -> resolved -> idle
