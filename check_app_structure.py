import sys

print("Python version:", sys.version)
print("Python path:", sys.path)
print("Current working directory:", __import__("os").getcwd())

print("\nImporting restaurant_pos.main...")
from restaurant_pos.main import app  # noqa: E402

print("Imported successfully")
print("Menu items loaded:", len(app.state.menu_catalog))

print("\nRegistered routes:")
for route in app.routes:
    methods = ",".join(sorted(getattr(route, "methods", None) or ["WS"]))
    print(f"  {methods:<12} {route.path}")
