"""
Screen Glow Light Simulator

Simulates the ESP32 WebSocket server and shows the received glow color as a
single light in a window. Use this to try the GUI without hardware.

Run this FIRST, then run main.py and connect to: 127.0.0.1
"""

import asyncio
import json
import tkinter as tk
from threading import Thread

import websockets

import config

NUM_LEDS = config.DEFAULT_LED_COUNT
WS_PORT = config.DEFAULT_WEBSOCKET_PORT


def decode_led_frame(message, num_leds=NUM_LEDS):
    """Average raw RGB LED bytes into one color. Returns None for short frames."""
    if len(message) < num_leds * 3 or num_leds <= 0:
        return None
    totals = [0, 0, 0]
    for i in range(num_leds):
        for c in range(3):
            totals[c] += message[i * 3 + c]
    return tuple(t // num_leds for t in totals)


class LightSimulator:
    def __init__(self):
        self.root = tk.Tk()
        self.root.title("Screen Glow Simulator")
        self.root.geometry("480x360")
        self.root.configure(bg="#1a1a1a")

        self.status = tk.Label(
            self.root,
            text=f"🔴 Waiting for connection on ws://127.0.0.1:{WS_PORT}",
            font=("Arial", 12),
            bg="#1a1a1a",
            fg="#ff6666",
        )
        self.status.pack(pady=10)

        self.canvas = tk.Canvas(self.root, bg="#2a2a2a", highlightthickness=0)
        self.canvas.pack(fill="both", expand=True, padx=20, pady=10)

        self.color = (0, 0, 0)
        self.brightness = 255

        self.root.after(100, self.draw_light)

    def draw_light(self):
        self.canvas.delete("all")
        w = self.canvas.winfo_width()
        h = self.canvas.winfo_height()

        r, g, b = (int(c * self.brightness / 255) for c in self.color)
        color = f"#{r:02x}{g:02x}{b:02x}"

        # Glow halo around the light
        if color != "#000000":
            self.canvas.create_rectangle(
                10, 10, w - 10, h - 10, fill="", outline=color, width=6
            )
        self.canvas.create_rectangle(
            w * 0.25, h * 0.25, w * 0.75, h * 0.75, fill=color, outline="#444444"
        )
        self.canvas.create_text(
            w / 2, h - 20, text=f"RGB({r}, {g}, {b})", fill="#888888", font=("Arial", 9)
        )

        self.root.after(50, self.draw_light)

    def set_color(self, color):
        self.color = color

    def set_brightness(self, value):
        self.brightness = value

    def set_connected(self, connected):
        if connected:
            self.status.config(text="🟢 Connected! Receiving glow colors", fg="#66ff66")
        else:
            self.status.config(
                text=f"🔴 Waiting for connection on ws://127.0.0.1:{WS_PORT}",
                fg="#ff6666",
            )

    def run(self):
        self.root.mainloop()


# Global simulator reference
simulator = None


async def handle_client(websocket):
    """Handle WebSocket connections"""
    print(f"[Simulator] Client connected: {websocket.remote_address}")
    simulator.set_connected(True)

    # Send initial info (like real ESP32)
    await websocket.send(json.dumps({"type": "info", "ledCount": NUM_LEDS}))

    frame_count = 0
    try:
        async for message in websocket:
            if isinstance(message, str):
                try:
                    data = json.loads(message)
                except json.JSONDecodeError:
                    print(f"[Simulator] Invalid JSON: {message}")
                    continue

                cmd = data.get("cmd", "")
                if cmd == "info":
                    await websocket.send(json.dumps({"type": "info", "ledCount": NUM_LEDS}))
                elif cmd == "brightness":
                    simulator.set_brightness(data.get("value", 255))
                elif cmd == "clear":
                    simulator.set_color((0, 0, 0))
                    print("[Simulator] Light cleared")

            else:
                color = decode_led_frame(message)
                if color is None:
                    continue
                simulator.set_color(color)

                frame_count += 1
                if frame_count % config.LOG_EVERY_FRAMES == 0:
                    print(f"[Simulator Frame {frame_count}] Received: RGB{color}")

    except websockets.ConnectionClosed:
        print("[Simulator] Client disconnected")
    finally:
        simulator.set_connected(False)


async def start_server():
    print(f"[Simulator] Starting WebSocket server on ws://127.0.0.1:{WS_PORT}")
    async with websockets.serve(handle_client, "127.0.0.1", WS_PORT):
        await asyncio.Future()  # Run forever


def run_server():
    asyncio.run(start_server())


if __name__ == "__main__":
    simulator = LightSimulator()

    server_thread = Thread(target=run_server, daemon=True)
    server_thread.start()

    simulator.run()
