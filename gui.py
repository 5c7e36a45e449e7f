import tkinter as tk
from tkinter import messagebox
import ttkbootstrap as ttk

import config
from connection_manager import ConnectionManager, list_serial_ports
from frame_source import FrameClock, FrameSignal, ScreenCaptureSource
from glow_controller import GlowController
from settings import GlowSettings


class ScreenGlowApp:
    """Main application window."""

    def __init__(self, root):
        self.root = root
        self.root.title("Screen Glow Controller")
        self.root.geometry("620x560")

        # Connection manager
        self.conn = ConnectionManager()
        self.conn.on_connected = self._on_connected
        self.conn.on_disconnected = self._on_disconnected
        self.conn.on_error = self._on_error

        # Pipeline
        self.settings = GlowSettings()
        self.signal = FrameSignal()
        self.clock = None
        self.controller = None

        # Capture settings
        self.use_custom_region = tk.BooleanVar(value=False)
        self.region_x = tk.StringVar(value="25")
        self.region_y = tk.StringVar(value="25")
        self.region_w = tk.StringVar(value="50")
        self.region_h = tk.StringVar(value="50")
        self.fps_var = tk.StringVar(value=str(config.DEFAULT_FPS))

        # Connection mode
        self.connection_mode = tk.StringVar(value="USB")

        self.create_ui()
        self.refresh_ports()

    def create_ui(self):
        """Build the user interface."""

        # ===== Connection Frame =====
        conn_frame = ttk.Labelframe(
            self.root, text="Connection", padding=10, bootstyle="info"
        )
        conn_frame.pack(fill="x", padx=15, pady=5)

        mode_frame = ttk.Frame(conn_frame)
        mode_frame.pack(fill="x", pady=5)

        ttk.Label(mode_frame, text="Mode:").pack(side="left", padx=5)
        self.mode_combo = ttk.Combobox(
            mode_frame,
            textvariable=self.connection_mode,
            values=["USB", "WebSocket"],
            state="readonly",
            width=12,
        )
        self.mode_combo.pack(side="left", padx=5)

        ttk.Label(mode_frame, text="COM Port:").pack(side="left", padx=5)
        self.port_combo = ttk.Combobox(mode_frame, width=12, state="readonly")
        self.port_combo.pack(side="left", padx=5)
        ttk.Button(mode_frame, text="🔄", width=3, command=self.refresh_ports).pack(
            side="left", padx=2
        )

        ttk.Label(mode_frame, text="IP:").pack(side="left", padx=5)
        self.ip_entry = ttk.Entry(mode_frame, width=15)
        self.ip_entry.insert(0, config.DEFAULT_IP)
        self.ip_entry.pack(side="left", padx=5)

        btn_frame = ttk.Frame(conn_frame)
        btn_frame.pack(fill="x", pady=5)

        ttk.Button(btn_frame, text="Connect", command=self.connect_device).pack(
            side="left", padx=5
        )
        ttk.Button(btn_frame, text="Disconnect", command=self.disconnect_device).pack(
            side="left", padx=5
        )
        self.status_label = ttk.Label(btn_frame, text="Not Connected", foreground="red")
        self.status_label.pack(side="left", padx=20)

        # ===== Glow Settings Frame =====
        glow_frame = ttk.Labelframe(
            self.root, text="Glow Settings", padding=10, bootstyle="warning"
        )
        glow_frame.pack(fill="x", padx=15, pady=5)

        self.sample_scale, self.sample_label = self._add_scale(
            glow_frame, 0, "Pixels Sampled:", 1, config.MAX_SAMPLE_COUNT,
            self.settings.sample_count, self._on_sample_count_changed,
        )
        self.smooth_scale, self.smooth_label = self._add_scale(
            glow_frame, 1, "Smoothing:", 1, config.MAX_SMOOTHING,
            self.settings.smoothing_size, self._on_smoothing_changed,
        )
        self.threshold_scale, self.threshold_label = self._add_scale(
            glow_frame, 2, "Bypass Threshold:", 0, config.MAX_COLOR_DIFFERENCE,
            self.settings.threshold_sum, self._on_threshold_changed,
        )

        ttk.Label(glow_frame, text="FPS:").grid(row=3, column=0, sticky="w", padx=5)
        ttk.Entry(glow_frame, width=6, textvariable=self.fps_var).grid(
            row=3, column=1, sticky="w", padx=5, pady=5
        )

        region_frame = ttk.Frame(glow_frame)
        region_frame.grid(row=4, column=0, columnspan=3, sticky="w", pady=5)
        ttk.Checkbutton(
            region_frame, text="Custom Region (%)", variable=self.use_custom_region
        ).pack(side="left", padx=5)
        for label, var in (
            ("X", self.region_x),
            ("Y", self.region_y),
            ("W", self.region_w),
            ("H", self.region_h),
        ):
            ttk.Label(region_frame, text=label).pack(side="left", padx=2)
            ttk.Entry(region_frame, width=4, textvariable=var).pack(side="left", padx=2)

        cfg_frame = ttk.Frame(glow_frame)
        cfg_frame.grid(row=5, column=0, columnspan=3, sticky="w", pady=5)
        ttk.Button(
            cfg_frame, text="Load Config", command=self.load_config, bootstyle="info-outline"
        ).pack(side="left", padx=5)
        ttk.Button(
            cfg_frame, text="Save Config", command=self.save_config, bootstyle="success-outline"
        ).pack(side="left", padx=5)

        # ===== Controls Frame =====
        ctrl_frame = ttk.Labelframe(
            self.root, text="Glow Controls", padding=10, bootstyle="success"
        )
        ctrl_frame.pack(fill="both", expand=True, padx=15, pady=5)

        self.start_btn = ttk.Button(
            ctrl_frame, text="▶ Start Glow", command=self.start_glow, bootstyle="success"
        )
        self.start_btn.pack(side="left", padx=10)

        self.stop_btn = ttk.Button(
            ctrl_frame,
            text="⏹ Stop",
            command=self.stop_glow,
            state="disabled",
            bootstyle="danger",
        )
        self.stop_btn.pack(side="left", padx=10)

        # Preview of the color sent to the light
        self.preview = tk.Canvas(ctrl_frame, width=120, height=80, bg="black")
        self.preview.pack(side="right", padx=10)

        self.status_bar = ttk.Label(self.root, text="Ready", relief="sunken", anchor="w")
        self.status_bar.pack(fill="x", side="bottom")

    def _add_scale(self, parent, row, text, low, high, value, on_change):
        ttk.Label(parent, text=text).grid(row=row, column=0, sticky="w", padx=5)
        scale = ttk.Scale(parent, from_=low, to=high, length=300)
        scale.set(value)
        scale.configure(command=on_change)
        scale.grid(row=row, column=1, padx=5, pady=5)
        label = ttk.Label(parent, text=str(value), width=6)
        label.grid(row=row, column=2, padx=5)
        return scale, label

    # ===== Settings Methods =====

    def _apply_setting(self, name, value, label):
        try:
            setattr(self.settings, name, value)
        except ValueError as e:
            messagebox.showerror("Invalid Setting", str(e))
            return
        label.config(text=str(value))

    def _on_sample_count_changed(self, value):
        self._apply_setting("sample_count", int(float(value)), self.sample_label)

    def _on_smoothing_changed(self, value):
        self._apply_setting("smoothing_size", int(float(value)), self.smooth_label)

    def _on_threshold_changed(self, value):
        self._apply_setting("threshold_sum", int(float(value)), self.threshold_label)

    def save_config(self):
        """Save glow settings to file."""
        try:
            self.settings.save(config.SETTINGS_FILE)
            messagebox.showinfo("Success", f"Configuration saved to {config.SETTINGS_FILE}")
        except Exception as e:
            messagebox.showerror("Error", f"Failed to save config: {e}")

    def load_config(self):
        """Load glow settings from file."""
        try:
            loaded = GlowSettings.load(config.SETTINGS_FILE)
        except FileNotFoundError:
            messagebox.showwarning("Warning", "No saved configuration found")
            return
        except Exception as e:
            messagebox.showerror("Error", f"Failed to load config: {e}")
            return

        # Update in place so a running controller sees the new values
        self.settings.sample_count = loaded.sample_count
        self.settings.smoothing_size = loaded.smoothing_size
        self.settings.threshold_sum = loaded.threshold_sum
        self.sample_scale.set(loaded.sample_count)
        self.smooth_scale.set(loaded.smoothing_size)
        self.threshold_scale.set(loaded.threshold_sum)
        messagebox.showinfo("Success", "Configuration loaded")

    # ===== Connection Methods =====

    def refresh_ports(self):
        ports = list_serial_ports()
        self.port_combo["values"] = ports
        if ports:
            self.port_combo.set(ports[0])

    def connect_device(self):
        """Connect to device based on selected mode."""
        mode = self.connection_mode.get()
        self.status_label.config(text="Connecting...", foreground="orange")
        self.root.update()

        if mode == "USB":
            port = self.port_combo.get()
            if not port:
                messagebox.showwarning("Warning", "Please select a COM port")
                return
            ok = self.conn.connect_usb(port)
            details = f"USB: {port}"
        else:
            ip = self.ip_entry.get().strip()
            if not ip:
                messagebox.showwarning("Warning", "Please enter IP address")
                return
            ok = self.conn.connect_websocket(ip)
            details = f"WS: {ip}"

        if ok:
            self.status_label.config(text=f"Connected ({details})", foreground="green")
        else:
            self.status_label.config(text="Connection Failed", foreground="red")

    def disconnect_device(self):
        self.stop_glow()
        self.conn.disconnect()
        self.status_label.config(text="Not Connected", foreground="red")

    def _on_connected(self, mode, details):
        self.root.after(
            0, lambda: self.status_bar.config(text=f"Connected, {self.conn.led_count} LEDs")
        )

    def _on_disconnected(self):
        self.root.after(
            0, lambda: self.status_label.config(text="Disconnected", foreground="red")
        )

    def _on_error(self, error):
        self.root.after(0, lambda: messagebox.showerror("Connection Error", error))

    # ===== Glow Loop =====

    def _capture_region(self):
        if not self.use_custom_region.get():
            return None
        try:
            return tuple(
                int(var.get() or "0")
                for var in (self.region_x, self.region_y, self.region_w, self.region_h)
            )
        except ValueError as e:
            print(f"Region calc error: {e}")
            return None

    def start_glow(self):
        """Start sampling the screen and driving the light."""
        if not self.conn.connected:
            messagebox.showwarning("Warning", "Please connect to device first")
            return

        try:
            fps = int(self.fps_var.get())
            self.clock = FrameClock(self.signal, fps)
        except ValueError as e:
            messagebox.showerror("Error", f"Invalid FPS: {e}")
            return

        source = ScreenCaptureSource(region=self._capture_region())
        self.controller = GlowController(
            source, self.conn, self.settings, signal=self.signal
        )
        self.controller.on_color = self._on_color
        self.controller.start()
        self.clock.start()

        self.start_btn.config(state="disabled")
        self.stop_btn.config(state="normal")
        self.status_bar.config(text="Glow running...")

    def stop_glow(self):
        """Stop the glow loop and turn the light off."""
        if self.clock:
            self.clock.stop()
            self.clock = None
        if self.controller:
            self.controller.stop()
            self.controller = None

        self.start_btn.config(state="normal")
        self.stop_btn.config(state="disabled")
        self.status_bar.config(text="Glow stopped")
        if self.conn.connected:
            self.conn.clear()

    def _on_color(self, color):
        r, g, b = color[0], color[1], color[2]
        controller = self.controller
        fps = controller.fps if controller else 0.0

        def update_ui():
            self.preview.config(bg=f"#{r:02x}{g:02x}{b:02x}")
            if controller is not None and self.controller is controller:
                self.status_bar.config(text=f"Glow running... {fps:.0f} FPS")

        self.root.after(0, update_ui)
