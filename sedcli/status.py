"""
Diagnostic status decoder.

A handler returns a plain integer. This module turns it into one human-readable
line (or none) using one of two vocabularies:

- STANDARD mode (device management over the storage protocol):
  • negative values are OS/driver errors (-EINVAL, -ENODEV, -ENOMEM, other);
  • driver errors 4 and 5 (interrupted system call, I/O error) short-circuit;
  • 0x00-0x12 and 0x3F are protocol status codes with canned names;
  • any other value up to 0xFFFF is a hardware completion status word, split
    into its sub-fields when the driver reported one.
- KMIP mode (key-management protocol client):
  • a failure sentinel and a "connected" sentinel, nothing else.

The decoder takes its mode and the driver error as explicit configuration; it
keeps no state between calls.
"""
import enum
import errno
from typing import NamedTuple

from .reporting import Severity

KMIP_FAILURE = -1
KMIP_SUCCESS = 0
KMIP_SUCCESS_CONNECTED = 1

PROTOCOL_SUCCESS = 0x00
PROTOCOL_FAIL = 0x3F

_PROTOCOL_STATUSES = {
    0x00: "SUCCESS",
    0x01: "NOT_AUTHORIZED",
    0x02: "OBSOLETE",
    0x03: "SP_BUSY",
    0x04: "SP_FAILED",
    0x05: "SP_DISABLED",
    0x06: "SP_FROZEN",
    0x07: "NO_SESSIONS_AVAILABLE",
    0x08: "UNIQUENESS_CONFLICT",
    0x09: "INSUFFICIENT_SPACE",
    0x0A: "INSUFFICIENT_ROWS",
    0x0B: "OBSOLETE",
    0x0C: "INVALID PARAMETER",
    0x0D: "OBSOLETE",
    0x0E: "OBSOLETE",
    0x0F: "TPER_MALFUNCTION",
    0x10: "TRANSACTION_FAILURE",
    0x11: "RESPONSE_OVERFLOW",
    0x12: "AUTHORITY_LOCKED_OUT",
    0x3F: "FAIL",
}

_DRIVER_ERRORS = {
    errno.EINTR: "Interrupted system call",
    errno.EIO: "I/O error",
}

_OS_ERRORS = {
    -errno.EINVAL: "Invalid parameter.",
    -errno.ENODEV: "Couldn't determine device state.",
    -errno.ENOMEM: "No memory.",
}


class DiagnosticMode(enum.Enum):
    STANDARD = "standard"
    KMIP = "kmip"


class StatusConfig(NamedTuple):
    """
    Decoder configuration.

    - mode: which vocabulary to use.
    - driver_error: last error reported by the device driver; nonzero means a
      hardware completion status is available for decomposition.
    - program: label prefixed to OS/driver level messages.
    """
    mode: DiagnosticMode = DiagnosticMode.STANDARD
    driver_error: int = 0
    program: str = "sedcli"

    @property
    def hardware_status(self):
        return self.driver_error != 0


class HardwareStatus(NamedTuple):
    """
    16-bit completion status word, least significant bit first:
    SC [0:8), SCT [8:11), CRD [11:13), M [13], DNR [14], reserved [15].
    """
    sc: int
    sct: int
    crd: int
    more: int
    dnr: int
    reserved: int

    @classmethod
    def from_word(cls, word):
        word &= 0xFFFF
        return cls(
            sc=word & 0xFF,
            sct=(word >> 8) & 0x7,
            crd=(word >> 11) & 0x3,
            more=(word >> 13) & 0x1,
            dnr=(word >> 14) & 0x1,
            reserved=(word >> 15) & 0x1,
        )


class Diagnostic(NamedTuple):
    severity: Severity
    message: str


def status_text(code):
    """
    canned name of a protocol status code, or None when it has none.
    """
    if code < PROTOCOL_SUCCESS or code > PROTOCOL_FAIL:
        return None
    return _PROTOCOL_STATUSES.get(code)


class StatusDecoder:
    def __init__(self, config=StatusConfig()):
        self.config = config

    def decode(self, result):
        """
        Diagnostic for a handler result, or None when nothing is to be said.
        """
        if self.config.mode is DiagnosticMode.KMIP:
            return self._decode_kmip(result)
        return self._decode_standard(result)

    def report(self, result, reporter):
        if (diagnostic := self.decode(result)) is not None:
            reporter.report(diagnostic.severity, diagnostic.message)
        return diagnostic

    def _decode_kmip(self, result):
        program = "%s-kmip" % self.config.program
        if result < 0:
            if result == KMIP_FAILURE:
                return Diagnostic(Severity.ERR, "%s: Failure." % program)
            return Diagnostic(Severity.ERR, "%s: Unknown error." % program)
        if result == KMIP_SUCCESS_CONNECTED:
            return Diagnostic(Severity.ERR, "%s: Successful connection to the KMIP server." % program)
        return None

    def _decode_standard(self, result):
        program = self.config.program
        if result < 0:
            return Diagnostic(Severity.ERR, "%s: %s" % (program, _OS_ERRORS.get(result, "Unknown error.")))

        if (text := _DRIVER_ERRORS.get(self.config.driver_error)) is not None:
            return Diagnostic(Severity.ERR, "%s: IOCTL error: 0x%02x %s." % (program, self.config.driver_error, text))

        if (text := status_text(result)) is not None:
            severity = Severity.INFO if result == PROTOCOL_SUCCESS else Severity.ERR
            return Diagnostic(severity, "status: 0x%02x %s" % (result, text))

        if result <= 0xFFFF and self.config.hardware_status:
            status = HardwareStatus.from_word(result)
            return Diagnostic(Severity.ERR, "%s: NVMe error: %d\nSC: %d | SCT: %d | CRD: %d | M: %d | DNR: %d" % (
                program, result, status.sc, status.sct, status.crd, status.more, status.dnr
            ))

        return Diagnostic(Severity.ERR, "status: Unknown status: %d" % result)


__all__ = (
    "KMIP_FAILURE",
    "KMIP_SUCCESS",
    "KMIP_SUCCESS_CONNECTED",
    "PROTOCOL_SUCCESS",
    "PROTOCOL_FAIL",
    "DiagnosticMode",
    "StatusConfig",
    "HardwareStatus",
    "Diagnostic",
    "status_text",
    "StatusDecoder",
)
