"""Telemetry tags returned by ``ExchangeData`` and where they are stored."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Dict, Tuple


@dataclass
class DecodedState:
    """Last decoded value of every telemetry tag, 0.0 until first seen."""

    physics_time_s: float = 0.0
    physics_speed_multiplier: float = 0.0
    airspeed_mps: float = 0.0
    altitude_asl_m: float = 0.0
    altitude_agl_m: float = 0.0
    groundspeed_mps: float = 0.0
    pitch_rate_dps: float = 0.0
    roll_rate_dps: float = 0.0
    yaw_rate_dps: float = 0.0
    azimuth_deg: float = 0.0
    inclination_deg: float = 0.0
    roll_deg: float = 0.0
    orientation_qx: float = 0.0
    orientation_qy: float = 0.0
    orientation_qz: float = 0.0
    orientation_qw: float = 0.0
    position_x_m: float = 0.0
    position_y_m: float = 0.0
    velocity_world_u_mps: float = 0.0
    velocity_world_v_mps: float = 0.0
    velocity_world_w_mps: float = 0.0
    velocity_body_u_mps: float = 0.0
    velocity_body_v_mps: float = 0.0
    velocity_body_w_mps: float = 0.0
    accel_world_x_mps2: float = 0.0
    accel_world_y_mps2: float = 0.0
    accel_world_z_mps2: float = 0.0
    accel_body_x_mps2: float = 0.0
    accel_body_y_mps2: float = 0.0
    accel_body_z_mps2: float = 0.0
    wind_x_mps: float = 0.0
    wind_y_mps: float = 0.0
    wind_z_mps: float = 0.0
    prop_rpm: float = 0.0
    heli_main_rotor_rpm: float = 0.0
    battery_voltage_v: float = 0.0
    battery_current_a: float = 0.0
    battery_remaining_mah: float = 0.0
    fuel_remaining_oz: float = 0.0
    is_locked: float = 0.0
    has_lost_components: float = 0.0
    engine_running: float = 0.0
    touching_ground: float = 0.0
    controller_active: float = 0.0
    aircraft_status: float = 0.0
    reset_button_pressed: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class KeyTableEntry:
    tag: str
    slot: str


KEYTABLE: Tuple[KeyTableEntry, ...] = (
    KeyTableEntry("m-currentPhysicsTime-SEC", "physics_time_s"),
    KeyTableEntry("m-currentPhysicsSpeedMultiplier", "physics_speed_multiplier"),
    KeyTableEntry("m-airspeed-MPS", "airspeed_mps"),
    KeyTableEntry("m-altitudeASL-MTR", "altitude_asl_m"),
    KeyTableEntry("m-altitudeAGL-MTR", "altitude_agl_m"),
    KeyTableEntry("m-groundspeed-MPS", "groundspeed_mps"),
    KeyTableEntry("m-pitchRate-DEGpSEC", "pitch_rate_dps"),
    KeyTableEntry("m-rollRate-DEGpSEC", "roll_rate_dps"),
    KeyTableEntry("m-yawRate-DEGpSEC", "yaw_rate_dps"),
    KeyTableEntry("m-azimuth-DEG", "azimuth_deg"),
    KeyTableEntry("m-inclination-DEG", "inclination_deg"),
    KeyTableEntry("m-roll-DEG", "roll_deg"),
    KeyTableEntry("m-orientationQuaternion-X", "orientation_qx"),
    KeyTableEntry("m-orientationQuaternion-Y", "orientation_qy"),
    KeyTableEntry("m-orientationQuaternion-Z", "orientation_qz"),
    KeyTableEntry("m-orientationQuaternion-W", "orientation_qw"),
    KeyTableEntry("m-aircraftPositionX-MTR", "position_x_m"),
    KeyTableEntry("m-aircraftPositionY-MTR", "position_y_m"),
    KeyTableEntry("m-velocityWorldU-MPS", "velocity_world_u_mps"),
    KeyTableEntry("m-velocityWorldV-MPS", "velocity_world_v_mps"),
    KeyTableEntry("m-velocityWorldW-MPS", "velocity_world_w_mps"),
    KeyTableEntry("m-velocityBodyU-MPS", "velocity_body_u_mps"),
    KeyTableEntry("m-velocityBodyV-MPS", "velocity_body_v_mps"),
    KeyTableEntry("m-velocityBodyW-MPS", "velocity_body_w_mps"),
    KeyTableEntry("m-accelerationWorldAX-MPS2", "accel_world_x_mps2"),
    KeyTableEntry("m-accelerationWorldAY-MPS2", "accel_world_y_mps2"),
    KeyTableEntry("m-accelerationWorldAZ-MPS2", "accel_world_z_mps2"),
    KeyTableEntry("m-accelerationBodyAX-MPS2", "accel_body_x_mps2"),
    KeyTableEntry("m-accelerationBodyAY-MPS2", "accel_body_y_mps2"),
    KeyTableEntry("m-accelerationBodyAZ-MPS2", "accel_body_z_mps2"),
    KeyTableEntry("m-windX-MPS", "wind_x_mps"),
    KeyTableEntry("m-windY-MPS", "wind_y_mps"),
    KeyTableEntry("m-windZ-MPS", "wind_z_mps"),
    KeyTableEntry("m-propRPM", "prop_rpm"),
    KeyTableEntry("m-heliMainRotorRPM", "heli_main_rotor_rpm"),
    KeyTableEntry("m-batteryVoltage-VOLTS", "battery_voltage_v"),
    KeyTableEntry("m-batteryCurrentDraw-AMPS", "battery_current_a"),
    KeyTableEntry("m-batteryRemainingCapacity-MAH", "battery_remaining_mah"),
    KeyTableEntry("m-fuelRemaining-OZ", "fuel_remaining_oz"),
    KeyTableEntry("m-isLocked", "is_locked"),
    KeyTableEntry("m-hasLostComponents", "has_lost_components"),
    KeyTableEntry("m-anEngineIsRunning", "engine_running"),
    KeyTableEntry("m-isTouchingGround", "touching_ground"),
    KeyTableEntry("m-flightAxisControllerIsActive", "controller_active"),
    KeyTableEntry("m-currentAircraftStatus", "aircraft_status"),
    KeyTableEntry("m-resetButtonHasBeenPressed", "reset_button_pressed"),
)


def state_slots() -> Tuple[str, ...]:
    """Return the slot names available on :class:`DecodedState`."""

    return tuple(f.name for f in fields(DecodedState))
