"""SOAP action names understood by the RealFlight link server."""

from enum import Enum


class Action(str, Enum):
    INJECT_CONTROLLER = "InjectUAVControllerInterface"
    RESTORE_CONTROLLER = "RestoreOriginalControllerDevice"
    EXCHANGE_DATA = "ExchangeData"
    RESET_AIRCRAFT = "ResetAircraft"


# Zero-argument actions still carry this placeholder body.
PLACEHOLDER_BODY = "<a>1</a><b>2</b>"
