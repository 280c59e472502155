"""Protocol layer: report framing, field codecs, command builders, and response parsing."""

from .framing import build_frame, HID_REPORT_SIZE
from .commands import Opcode, build_command
from .transaction import Transport, execute
