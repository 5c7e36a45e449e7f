import ttkbootstrap as ttk
from gui import ScreenGlowApp

if __name__ == "__main__":
    # "darkly", "superhero", "solar", "cyborg" are good dark themes
    root = ttk.Window(themename="darkly")
    app = ScreenGlowApp(root)
    root.mainloop()
