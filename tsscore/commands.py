"""Command and setting tables describing the binary wire formats."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

_UINT16_MAX = 0xFFFF


@dataclass(frozen=True)
class Param:
    """One parameter: ``count`` elements of ``size`` bytes each.

    A size of 0 marks a null-terminated string.
    """

    count: int
    size: int

    def is_string(self) -> bool:
        return self.count > 0 and self.size == 0


ParamList = Tuple[Param, ...]


@dataclass(frozen=True)
class Command:
    """A numbered command with its input and output formats.

    A format of None means the command sends or returns nothing; an empty
    tuple means the data is dynamic and not described by the table.
    """

    num: int
    name: str
    in_format: Optional[ParamList] = None
    out_format: Optional[ParamList] = None


@dataclass(frozen=True)
class Setting:
    """A setting key pattern with its write and read formats.

    Patterns may contain ``%d`` to accept a run of decimal digits.
    """

    name: str
    in_format: Optional[ParamList] = None
    out_format: Optional[ParamList] = None


@dataclass
class SettingResponse:
    """Reply to a settings write."""

    error: int
    num_success: int


def _sized(size: int):
    return lambda count: Param(count, size)


FLOAT = _sized(4)
DOUBLE = _sized(8)
U8 = _sized(1)
U16 = _sized(2)
U32 = _sized(4)
U64 = _sized(8)
S8 = _sized(1)
S16 = _sized(2)
S32 = _sized(4)
S64 = _sized(8)
STRING = _sized(0)

# Dynamic formats have no fixed description.
DYNAMIC: ParamList = ()


def _cmd(num, name, inputs=None, outputs=None) -> Command:
    return Command(
        num,
        name,
        tuple(inputs) if inputs is not None else None,
        tuple(outputs) if outputs is not None else None,
    )


def _read(num, name, *outputs) -> Command:
    return _cmd(num, name, None, outputs)


def _write(num, name, *inputs) -> Command:
    return _cmd(num, name, inputs, None)


def _action(num, name) -> Command:
    return _cmd(num, name)


_EEPTS_STEP = (U32(1), U32(1), DOUBLE(1), DOUBLE(1), FLOAT(1), FLOAT(1), FLOAT(1),
               FLOAT(1), FLOAT(1), FLOAT(1), U8(1), U8(1), FLOAT(1), FLOAT(1))

_COMMAND_LIST = (
    _read(0, "GetTaredOrientation", FLOAT(4)),
    _read(1, "GetTaredOrientationAsEulerAngles", FLOAT(3)),
    _read(2, "GetTaredOrientationAsRotationMatrix", FLOAT(9)),
    _read(3, "GetTaredOrientationAsAxisAngles", FLOAT(3), FLOAT(1)),
    _read(4, "GetTaredOrientationAsTwoVector", FLOAT(3), FLOAT(3)),
    _read(5, "GetDifferenceQuaternion", FLOAT(4)),
    _read(6, "GetUntaredOrientation", FLOAT(4)),
    _read(7, "GetUntaredOrientationAsEulerAngles", FLOAT(3)),
    _read(8, "GetUntaredOrientationAsRotationMatrix", FLOAT(9)),
    _read(9, "GetUntaredOrientationAsAxisAngles", FLOAT(3), FLOAT(1)),
    _read(10, "GetUntaredOrientationAsTwoVector", FLOAT(3), FLOAT(3)),
    _read(11, "GetTaredTwoVectorInSensorFrame", FLOAT(3), FLOAT(3)),
    _read(12, "GetUntaredTwoVectorInSensorFrame", FLOAT(3), FLOAT(3)),
    _read(13, "GetPrimaryBarometerPressure", FLOAT(1)),
    _read(14, "GetPrimaryBarometerAltitude", FLOAT(1)),
    _cmd(15, "GetBarometerAltitudeByID", (U8(1),), (FLOAT(1),)),
    _cmd(16, "GetBarometerPressureByID", (U8(1),), (FLOAT(1),)),
    _action(19, "SetOffsetWithCurrentOrientation"),
    _action(20, "ResetBaseOffset"),
    _action(22, "SetBaseOffsetWithCurrentOrientation"),
    _read(31, "GetInterruptStatus", U8(1)),
    _read(32, "GetAllNormalizedComponentSensorData", FLOAT(3), FLOAT(3), FLOAT(3)),
    _read(33, "GetNormalizedGyroRateVector", FLOAT(3)),
    _read(34, "GetNormalizedAccelerometerVector", FLOAT(3)),
    _read(35, "GetNormalizedMagnetometerVector", FLOAT(3)),
    _read(37, "GetAllCorrectedComponentSensorData", FLOAT(3), FLOAT(3), FLOAT(3)),
    _read(38, "GetCorrectedGyroRateVector", FLOAT(3)),
    _read(39, "GetCorrectedAccelerometerVector", FLOAT(3)),
    _read(40, "GetCorrectedMagnetometerVector", FLOAT(3)),
    _read(41, "GetCorrectedGlobalLinearAcceleration", FLOAT(3)),
    _read(42, "GetCorrectedLocalLinearAcceleration", FLOAT(3)),
    _read(43, "GetTemperatureCelsius", FLOAT(1)),
    _read(44, "GetTemperatureFahrenheit", FLOAT(1)),
    _read(45, "GetMotionlessConfidenceFactor", FLOAT(1)),
    _cmd(48, "CorrectRawGyroRateVector", (FLOAT(3), U8(1)), (FLOAT(3),)),
    _cmd(49, "CorrectRawAccelerometerVector", (FLOAT(3), U8(1)), (FLOAT(3),)),
    _cmd(50, "CorrectRawMagnetometerVector", (FLOAT(3), U8(1)), (FLOAT(3),)),
    _cmd(51, "GetNormalizedGyroRateByID", (U8(1),), (FLOAT(3),)),
    _cmd(52, "GetNormalizedAccelerometerVectorByID", (U8(1),), (FLOAT(3),)),
    _cmd(53, "GetNormalizedMagnetometerVectorByID", (U8(1),), (FLOAT(3),)),
    _cmd(54, "GetCorrectedGyroRateByID", (U8(1),), (FLOAT(3),)),
    _cmd(55, "GetCorrectedAccelerometerVectorByID", (U8(1),), (FLOAT(3),)),
    _cmd(56, "GetCorrectedMagnetometerVectorByID", (U8(1),), (FLOAT(3),)),
    _action(57, "MassStorageControllerEnable"),
    _action(58, "MassStorageControllerDisable"),
    _action(59, "FormatSDCard"),
    _action(60, "LoggingStart"),
    _action(61, "LoggingStop"),
    _write(62, "SetClockValues", U16(1), U8(1), U8(1), U8(1), U8(1), U8(1)),
    _read(63, "GetClockValues", U16(1), U8(1), U8(1), U8(1), U8(1), U8(1)),
    _read(64, "LoggingGetStatus", U8(1)),
    _cmd(65, "GetRawGyroRateByID", (U8(1),), (FLOAT(3),)),
    _cmd(66, "GetRawAccelerometerVectorByID", (U8(1),), (FLOAT(3),)),
    _cmd(67, "GetRawMagnetometerVectorByID", (U8(1),), (FLOAT(3),)),
    _action(68, "EEPTSStart"),
    _action(69, "EEPTSStop"),
    _read(70, "EEPTSGetOldestStep", *_EEPTS_STEP),
    _read(71, "EEPTSGetNewestStep", *_EEPTS_STEP),
    _read(72, "EEPTSGetAvailableStepCount", U8(1)),
    _write(73, "EEPTSInsertGPS", DOUBLE(1), DOUBLE(1)),
    _action(74, "EEPTSAutoOffset"),
    _cmd(83, "StreamingGetCommandLabel", (U8(1),), (STRING(1),)),
    _cmd(84, "StreamingGetPacket", None, DYNAMIC),
    _action(85, "StreamingStart"),
    _action(86, "StreamingStop"),
    _write(87, "LoggingPauseStreaming", U8(1)),
    _read(93, "GetClockValuesString", STRING(1)),
    _read(94, "GetTimestamp", U64(1)),
    _write(95, "SetTimestamp", U64(1)),
    _action(96, "SetTareWithCurrentOrientation"),
    _action(97, "SetBaseTareWithCurrentOrientation"),
    _action(120, "ResetFilter"),
    _read(126, "GetDebugMessageCount", U16(1)),
    _read(127, "GetDebugMessage", STRING(1)),
    _read(128, "SelfTest", U32(1)),
    _write(165, "BeginPassiveCalibration", U8(1)),
    _read(166, "GetPassiveCalibrationActive", U8(1)),
    _action(167, "BeginActiveCalibration"),
    _read(168, "GetActiveCalibrationActive", U8(1)),
    _read(170, "LoggingGetLastLiveLocation", U64(1), STRING(1)),
    _read(171, "FsGetNextDirectoryItem", U8(1), STRING(1), U64(1)),
    _write(172, "FsChangeDirectory", STRING(1)),
    _write(173, "FsOpenFile", STRING(1)),
    _action(174, "CloseFile"),
    _read(175, "FileGetRemainingSize", U64(1)),
    _read(176, "FileReadLine", STRING(1)),
    _cmd(177, "FileReadBytes", (U16(1),), DYNAMIC),
    _write(178, "FsDeleteFileOrFolder", STRING(1)),
    _write(179, "FileSetCursorIndex", U64(1)),
    _read(180, "FileStreamingStart", U64(1)),
    _action(181, "FileStreamingStop"),
    _read(201, "BatteryGetVoltage", FLOAT(1)),
    _read(202, "BatteryGetPercent", U8(1)),
    _read(203, "BatteryGetStatus", U8(1)),
    _read(215, "GPSGetLatitudeandLongitude", DOUBLE(1), DOUBLE(1)),
    _read(216, "GPSGetAltitude", FLOAT(1)),
    _read(217, "GPSGetFixStatus", U8(1)),
    _read(218, "GPSGetHDOP", U8(1)),
    _read(219, "GPSGetSatellites", U8(1)),
    _action(225, "CommitSettings"),
    _action(226, "SoftwareReset"),
    _action(229, "EnterBootloader"),
    _read(250, "GetButtonState", U8(1)),
)

COMMANDS: Dict[int, Command] = {command.num: command for command in _COMMAND_LIST}


def get_command(num: int) -> Optional[Command]:
    """Return the command with number ``num``, or None if it is not defined."""
    if not 0 <= num <= 0xFF:
        raise ValueError(f"command number {num} is outside 0..255")
    return COMMANDS.get(num)


def param_list_size(params: Optional[Iterable[Param]]) -> Tuple[int, int]:
    """Return (minimum, maximum) byte size of a parameter list.

    Strings count as zero bytes toward the minimum and make the maximum
    unbounded (65535).
    """
    size = 0
    uncapped = False
    for param in params or ():
        if param.count == 0:
            break
        if param.is_string():
            uncapped = True
        size += param.count * param.size
    return size, (_UINT16_MAX if uncapped else size)


def _rw(name, *params) -> Setting:
    return Setting(name, tuple(params), tuple(params))


def _r(name, *params) -> Setting:
    return Setting(name, None, tuple(params))


def _w(name, *params) -> Setting:
    return Setting(name, tuple(params), None)


def _cmd_setting(name) -> Setting:
    return Setting(name, (), None)


def _aggregate(name) -> Setting:
    return Setting(name, None, ())


SETTINGS: Tuple[Setting, ...] = (
    # System
    _cmd_setting("default"),
    _cmd_setting("commit"),
    _cmd_setting("reboot"),
    _aggregate("all"),
    _aggregate("settings"),
    _r("serial_number", U64(1)),
    _rw("timestamp", U64(1)),
    _rw("led_mode", U8(1)),
    _rw("led_rgb", FLOAT(3)),
    _r("version_firmware", STRING(1)),
    _r("version_hardware", STRING(1)),
    _r("update_rate_sensor", U32(1)),
    _rw("header", U8(1)),
    _rw("header_status", U8(1)),
    _rw("header_timestamp", U8(1)),
    _rw("header_echo", U8(1)),
    _rw("header_checksum", U8(1)),
    _rw("header_serial", U8(1)),
    _rw("header_length", U8(1)),
    _r("valid_commands", STRING(1)),
    # Power management
    _rw("cpu_speed", U32(1)),
    _r("cpu_speed_cur", U32(1)),
    _w("pm_mode", U8(1)),
    _rw("pm_idle_enabled", U8(1)),
    # Streaming
    _rw("stream_slots", STRING(1)),
    _rw("stream_interval", U64(1)),
    _rw("stream_hz", FLOAT(1)),
    _rw("stream_duration", FLOAT(1)),
    _rw("stream_delay", FLOAT(1)),
    _rw("stream_mode", U8(1)),
    _rw("stream_count", U64(1)),
    _r("streamable_commands", STRING(1)),
    # Debug
    _rw("debug_level", U32(1)),
    _rw("debug_module", U32(1)),
    _rw("debug_mode", U8(1)),
    _rw("debug_led", U8(1)),
    _rw("debug_fault", U8(1)),
    _rw("debug_wdt", U8(1)),
    _rw("cat", STRING(1)),
    # Filter
    _rw("axis_order", STRING(1)),
    _rw("axis_order_c", STRING(1)),
    _rw("axis_offset_enabled", U8(1)),
    _rw("euler_order", STRING(1)),
    _r("update_rate_filter", U32(1)),
    _r("update_rate_sms", U32(1)),
    _rw("offset", FLOAT(4)),
    _rw("base_offset", FLOAT(4)),
    _rw("tare_quat", FLOAT(4)),
    _rw("tare_auto_base", U8(1)),
    _rw("base_tare", FLOAT(4)),
    _rw("tare_mat", FLOAT(9)),
    _rw("running_avg_orient", FLOAT(1)),
    _rw("filter_mode", U8(1)),
    _rw("filter_mref_mode", U8(1)),
    _rw("filter_mref", FLOAT(3)),
    _w("filter_mref_gps", DOUBLE(2)),
    _rw("filter_mref_dip", FLOAT(1)),
    # Components
    _r("valid_accels", STRING(1)),
    _r("valid_gyros", STRING(1)),
    _r("valid_mags", STRING(1)),
    _r("valid_baros", STRING(1)),
    _r("valid_components", STRING(1)),
    _rw("primary_accel", STRING(1)),
    _rw("primary_gyro", STRING(1)),
    _rw("primary_mag", STRING(1)),
    _rw("primary_sensor_rfade", FLOAT(1)),
    _rw("mag_bias_mode", U8(1)),
    _w("ord_all", U32(1)),
    _w("odr_accel", U32(1)),
    _w("odr_gyro", U32(1)),
    _w("odr_mag", U32(1)),
    _w("odr_baro", U32(1)),
    _rw("accel_enabled", U8(1)),
    _rw("gyro_enabled", U8(1)),
    _rw("mag_enabled", U8(1)),
    # Accel
    _rw("calib_mat_accel%d", FLOAT(9)),
    _rw("calib_bias_accel%d", FLOAT(3)),
    _rw("range_accel%d", U16(1)),
    _r("valid_ranges_accel%d", STRING(1)),
    _rw("oversample_accel%d", U16(1)),
    _rw("running_avg_accel%d", FLOAT(1)),
    _rw("odr_accel%d", U32(1)),
    _r("update_rate_accel%d", FLOAT(1)),
    # Gyro
    _rw("calib_mat_gyro%d", FLOAT(9)),
    _rw("calib_bias_gyro%d", FLOAT(3)),
    _rw("range_gyro%d", U16(1)),
    _r("valid_ranges_gyro%d", STRING(1)),
    _rw("oversample_gyro%d", U16(1)),
    _rw("running_avg_gyro%d", FLOAT(1)),
    _rw("odr_gyro%d", U32(1)),
    _r("update_rate_gyro%d", FLOAT(1)),
    # Mag
    _rw("calib_mat_mag%d", FLOAT(9)),
    _rw("calib_bias_mag%d", FLOAT(3)),
    _rw("range_mag%d", U16(1)),
    _r("valid_ranges_mag%d", STRING(1)),
    _rw("oversample_mag%d", U16(1)),
    _rw("running_avg_mag%d", FLOAT(1)),
    _rw("odr_mag%d", U32(1)),
    _r("update_rate_mag%d", FLOAT(1)),
    # Baro
    _rw("calib_bias_baro%d", FLOAT(1)),
    _w("calib_altitude_baro%d", FLOAT(1)),
    _rw("odr_baro%d", U32(1)),
    _r("update_rate_baro%d", FLOAT(1)),
    # EEPTS
    _rw("pts_offset_quat", FLOAT(4)),
    _cmd_setting("pts_default"),
    _aggregate("pts_settings"),
    _w("pts_preset_hand", U8(1)),
    _w("pts_preset_motion", U8(1)),
    _w("pts_preset_heading", U8(1)),
    _rw("pts_debug_level", U32(1)),
    _rw("pts_debug_module", U32(1)),
    _rw("pts_heading_mode", U32(1)),
    _rw("pts_initial_heading_mode", U32(1)),
    _rw("pts_hand_heading_mode", U32(1)),
    _rw("pts_mag_declination", FLOAT(1)),
    _rw("pts_auto_declination", U8(1)),
    _rw("pts_discard_slow", U8(1)),
    _rw("pts_segment_axis", U32(1)),
    _rw("pts_seg_noise", FLOAT(1)),
    _rw("pts_classifier_mode", U32(1)),
    _rw("pts_classifier_mode2", U32(1)),
    _rw("pts_location_classifier_mode", U32(1)),
    _rw("pts_hand_classifier_threshold", FLOAT(1)),
    _rw("pts_disabled_truth_motions", U32(1)),
    _rw("pts_dynamic_segmenter_enabled", U8(1)),
    _rw("pts_estimator_scalars", FLOAT(7)),
    _rw("pts_auto_estimator_scalar_rate", U32(1)),
    _rw("pts_running_correction", U8(1)),
    _rw("pts_hand_correction", U8(1)),
    _rw("pts_heading_correction_mode", U32(1)),
    _rw("pts_heading_min_dif", FLOAT(1)),
    _rw("pts_heading_reset_consistencies", U8(1)),
    _rw("pts_heading_backtrack_enabled", U8(1)),
    _rw("pts_motion_correction_radius", U32(1)),
    _rw("pts_motion_correction_consistency_req", U32(1)),
    _rw("pts_orient_ref_y_threshold", FLOAT(1)),
    _r("pts_version", STRING(1)),
    _rw("pts_date", U32(3)),
    _r("pts_wmm_version", STRING(1)),
    _w("pts_wmm_set", STRING(1)),
    _rw("pts_force_out_gps", U8(1)),
    _rw("pts_initial_heading_tolerance", FLOAT(1)),
    _rw("pts_heading_consistency_req", S32(1)),
    _rw("pts_heading_root_err_mul", FLOAT(1)),
    _rw("pts_heading_consistent_bias", FLOAT(1)),
    _rw("pts_strict_bias_enabled", U8(1)),
    # Embedded
    _rw("pin_mode0", U8(1)),
    _rw("pin_mode1", U8(1)),
    _rw("uart_baudrate", U32(1)),
    _rw("i2c_addr", U8(1)),
    # Data logger
    _rw("power_hold_time", FLOAT(1)),
    _rw("power_hold_state", U8(1)),
    _rw("power_initial_hold_state", U8(1)),
    _cmd_setting("fs_cfg_load"),
    _rw("fs_msc_enabled", U8(1)),
    _rw("fs_msc_auto", U8(1)),
    # Deprecated names of the fs_* settings above.
    _cmd_setting("sd_cfg_load"),
    _rw("sd_msc_enabled", U8(1)),
    _rw("sd_msc_auto", U8(1)),
    _rw("log_interval", U64(1)),
    _rw("log_hz", FLOAT(1)),
    _rw("log_start_event", STRING(1)),
    _rw("log_start_motion_threshold", FLOAT(1)),
    _rw("log_stop_event", STRING(1)),
    _rw("log_stop_motion_threshold", FLOAT(1)),
    _rw("log_stop_motion_delay", FLOAT(1)),
    _rw("log_stop_count", U64(1)),
    _rw("log_stop_duration", FLOAT(1)),
    _rw("log_stop_period_count", U32(1)),
    _rw("log_style", U8(1)),
    _rw("log_periodic_capture_time", FLOAT(1)),
    _rw("log_periodic_rest_time", FLOAT(1)),
    _rw("log_base_filename", STRING(1)),
    _rw("log_file_mode", U8(1)),
    _rw("log_data_mode", U8(1)),
    _rw("log_output_settings", U8(1)),
    _rw("log_header_enabled", U8(1)),
    _rw("log_folder_mode", U8(1)),
    _rw("log_immediate_output", U8(1)),
    _rw("log_immediate_output_header_enabled", U8(1)),
    _rw("log_immediate_output_header_mode", U8(1)),
    # BLE
    _rw("ble_name", STRING(1)),
    # GPS
    _rw("gps_standby", U8(1)),
    _rw("gps_led", U8(1)),
)


def _ascii_lower(char: str) -> str:
    return chr(ord(char) + 32) if "A" <= char <= "Z" else char


def setting_key_cmp(key: str, key_format: str) -> int:
    """Compare a key against a key pattern.

    Letters of ``key`` are matched case-insensitively; ``%d`` in the pattern
    consumes any run of digits. Returns 0 on a match, -1 or 1 for ordering,
    and -2 when the pattern holds an unknown format specifier.
    """
    i = j = 0
    while i < len(key) and j < len(key_format):
        format_char = key_format[j]
        if _ascii_lower(key[i]) == format_char:
            i += 1
            j += 1
        elif format_char == "%":
            j += 1
            if key_format[j:j + 1] != "d":
                return -2
            while i < len(key) and "0" <= key[i] <= "9":
                i += 1
            j += 1
        else:
            break

    key_char = _ascii_lower(key[i]) if i < len(key) else ""
    format_char = key_format[j] if j < len(key_format) else ""
    if key_char == format_char:
        return 0
    return -1 if key_char < format_char else 1


def get_setting(name: str) -> Optional[Setting]:
    """Return the first setting whose pattern matches ``name``, or None."""
    for setting in SETTINGS:
        if setting_key_cmp(name, setting.name) == 0:
            return setting
    return None