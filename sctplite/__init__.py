"""Building blocks of an SCTP stack: parameters, payload queues, reassembly, retransmission timers and streams."""

__version__ = "0.1.0"

__all__ = [
    "data",
    "paramheader",
    "params",
    "paramtype",
    "payload_queue",
    "pending_queue",
    "reassembly_queue",
    "rtx_timer",
    "serial",
    "stream",
]