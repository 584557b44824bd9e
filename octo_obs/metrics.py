"""
Prometheus Metrics Registration.

Custom metrics for tool execution, approval gating and chat turns.
"""

from prometheus_client import Counter, Histogram

# ============================================================================
# COUNTERS
# ============================================================================

tool_executions_total = Counter(
    "tool_executions_total",
    "Total tool executions",
    ["tool_name", "status"],  # success, failure
)

tool_approval_requests_total = Counter(
    "tool_approval_requests_total",
    "Write tool calls that hit the approval gate",
    ["tool_name", "decision"],  # pending, approved, denied
)

chat_turns_total = Counter(
    "chat_turns_total",
    "Chat turns handled",
    ["status"],  # completed, awaiting_approval, max_steps
)

# ============================================================================
# HISTOGRAMS
# ============================================================================

tool_execution_duration = Histogram(
    "tool_execution_duration_seconds",
    "Tool execution duration",
    ["tool_name"],
    buckets=(0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0),
)

agent_loop_duration = Histogram(
    "agent_loop_duration_seconds",
    "Complete agent loop duration",
    buckets=(1.0, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0),
)
