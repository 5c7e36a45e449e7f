import json
import time
import threading

import serial
import serial.tools.list_ports
import websocket

import config
from image_processor import apply_brightness


def build_led_payload(color, led_count, brightness=config.DEFAULT_BRIGHTNESS):
    """Repeat one color across the whole strip as raw RGB bytes."""
    r, g, b = apply_brightness(int(color[0]), int(color[1]), int(color[2]), brightness)
    return bytes([r, g, b] * led_count)


def build_serial_frame(rgb_data):
    """Wrap LED data in the USB framing: magic bytes, payload, XOR checksum."""
    checksum = 0
    for b in rgb_data:
        checksum ^= b
    return bytes([config.MAGIC_BYTE_1, config.MAGIC_BYTE_2]) + bytes(rgb_data) + bytes([checksum])


def list_serial_ports():
    return [p.device for p in serial.tools.list_ports.comports()]


class ConnectionManager:
    """Sends the glow color to an ESP32 LED strip via USB or WebSocket."""

    def __init__(self):
        self.mode = None  # 'usb', 'websocket'
        self.connected = False

        # Connection objects
        self.serial_port = None
        self.ws = None
        self.ws_thread = None

        # Callbacks
        self.on_connected = None
        self.on_disconnected = None
        self.on_message = None
        self.on_error = None

        # Device info received from ESP32
        self.led_count = config.DEFAULT_LED_COUNT
        self.brightness = config.DEFAULT_BRIGHTNESS

    @property
    def log_tag(self):
        return {"usb": "[USB]", "websocket": "[WS]"}.get(self.mode, "[Light]")

    def connect_usb(self, port: str, baud: int = config.DEFAULT_BAUD_RATE) -> bool:
        """Open the serial port and ask the strip for its LED count."""
        try:
            self.serial_port = serial.Serial(port, baud, timeout=1)
            time.sleep(2)  # Board resets when the port opens
            self.serial_port.reset_input_buffer()
        except Exception as e:
            self._error(f"USB connection failed: {e}")
            self.serial_port = None
            return False

        self.mode = "usb"
        self.connected = True
        if not self._request_device_info():
            print(f"[USB] No device info, keeping {self.led_count} LEDs")

        if self.on_connected:
            self.on_connected("usb", port)
        print(f"[USB] Light connected on {port}")
        return True

    def _request_device_info(self, attempts=3):
        """Ask a serial device for its info line. Returns True once one is parsed."""
        for attempt in range(1, attempts + 1):
            if not self.send_command({"cmd": "info"}):
                return False
            time.sleep(0.5)

            try:
                if not self.serial_port.in_waiting:
                    continue
                line = self.serial_port.readline().decode(errors="replace").strip()
            except Exception as e:
                print(f"[USB] Info read failed (attempt {attempt}/{attempts}): {e}")
                continue

            if line.startswith("{"):
                self._handle_message(line)
                return True
        return False

    def connect_websocket(
        self, ip: str, port: int = config.DEFAULT_WEBSOCKET_PORT, timeout: float = 5.0
    ) -> bool:
        """Open a WebSocket to the strip and wait until it is up."""
        self.ws = websocket.WebSocketApp(
            f"ws://{ip}:{port}",
            on_message=self._ws_on_message,
            on_error=self._ws_on_error,
            on_close=self._ws_on_close,
            on_open=self._ws_on_open,
        )
        self.ws_thread = threading.Thread(
            target=self.ws.run_forever,
            kwargs={"ping_interval": 5, "ping_timeout": 3},
            daemon=True,
        )
        self.ws_thread.start()

        if not self._wait_connected(timeout):
            self._error(f"WebSocket connection to {ip}:{port} timed out")
            return False
        return True

    def _wait_connected(self, timeout):
        deadline = time.time() + timeout
        while not self.connected and time.time() < deadline:
            time.sleep(0.1)
        return self.connected

    def disconnect(self):
        """Close whichever transport is open."""
        tag = self.log_tag
        handle = self.serial_port if self.mode == "usb" else self.ws
        self.connected = False
        self.mode = None
        self.serial_port = None
        self.ws = None

        if handle is not None:
            try:
                handle.close()
            except Exception as e:
                print(f"{tag} Close error: {e}")

        if self.on_disconnected:
            self.on_disconnected()

    def send_command(self, cmd: dict) -> bool:
        """Send JSON command to device."""
        if not self.connected:
            return False

        try:
            data = json.dumps(cmd)

            if self.mode == "usb":
                self.serial_port.write((data + "\n").encode())

            elif self.mode == "websocket":
                self.ws.send(data)

            return True

        except Exception as e:
            print(f"{self.log_tag} Send command error: {e}")
            return False

    def send_colors(self, rgb_data: bytes) -> bool:
        """Send LED color data to device."""
        if not self.connected:
            return False

        try:
            if self.mode == "websocket":
                # WebSocket uses raw binary (has its own integrity check)
                self.ws.send(rgb_data, opcode=websocket.ABNF.OPCODE_BINARY)

            elif self.mode == "usb":
                self.serial_port.write(build_serial_frame(rgb_data))

            return True

        except Exception as e:
            print(f"{self.log_tag} Send colors error: {e}")
            return False

    def set_color(self, color) -> bool:
        """Light the whole strip with one RGBA color. Alpha is not sent."""
        return self.send_colors(build_led_payload(color, self.led_count, self.brightness))

    def set_brightness(self, brightness: int):
        self.brightness = max(0, min(255, int(brightness)))

    def clear(self) -> bool:
        return self.send_command({"cmd": "clear"})

    # WebSocket callbacks
    def _ws_on_open(self, ws):
        self.mode = "websocket"
        self.connected = True
        print("[WS] Connection opened, waiting for device info...")
        if self.on_connected:
            self.on_connected("websocket", "")

    def _ws_on_message(self, ws, message):
        self._handle_message(message)

    def _ws_on_error(self, ws, error):
        self._error(str(error))

    def _ws_on_close(self, ws, close_status_code, close_msg):
        self.connected = False
        if self.on_disconnected:
            self.on_disconnected()

    def _handle_message(self, message):
        try:
            data = json.loads(message)
        except json.JSONDecodeError:
            return

        if not isinstance(data, dict):
            return

        if data.get("type", "") in ["info", "ready"]:
            self.led_count = data.get("ledCount", config.DEFAULT_LED_COUNT)
            print(f"{self.log_tag} Device info received: {self.led_count} LEDs")

        if self.on_message:
            self.on_message(data)

    def _error(self, msg):
        print(f"{self.log_tag} Connection error: {msg}")
        if self.on_error:
            self.on_error(msg)
