import subprocess
import sys
import os


def setup_python_path():
    # Get the project root directory
    root_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    # Add project root to PYTHONPATH
    if root_dir not in sys.path:
        sys.path.insert(0, root_dir)
        os.environ['PYTHONPATH'] = os.pathsep.join([root_dir, os.environ.get('PYTHONPATH', '')])
    return root_dir


def main():
    print("🚀 Starting UMKM RAG API...")

    root_dir = setup_python_path()

    port = os.environ.get("PORT", "8000")
    backend_cmd = [
        sys.executable, '-m', 'uvicorn', 'backend.api_endpoints.api_app:app',
        '--host', '0.0.0.0', '--port', port,
    ]
    backend_proc = subprocess.Popen(backend_cmd, cwd=root_dir, env=os.environ.copy())

    print(f"🔗 Backend API: http://localhost:{port}")
    print("⚠️  Press Ctrl+C to stop the server.")

    try:
        backend_proc.wait()
    except KeyboardInterrupt:
        print("\n🛑 Stopping server...")
        backend_proc.terminate()
        print("✅ Server stopped.")


if __name__ == "__main__":
    main()
