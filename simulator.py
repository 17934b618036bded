"""Interactive CLI simulator — exercise the captcha flow without an SMS gateway."""

import asyncio

from captcha_service.services.client_api import CaptchaClient

BLUE = "\033[94m"
GREEN = "\033[92m"
RED = "\033[91m"
YELLOW = "\033[93m"
DIM = "\033[2m"
BOLD = "\033[1m"
RESET = "\033[0m"

HOST = "127.0.0.1"
PORT = 8080


async def main() -> None:
    print(f"\n{BOLD}{'=' * 52}")
    print(f"  📱  Captcha Service — Simulator")
    print(f"{'=' * 52}{RESET}\n")

    print(f"{DIM}Commands:  send <phone>   verify <phone> <code>   peek <phone>   quit{RESET}")
    print(f"{DIM}Tip: try 13800138000; 'peek' shows the code an SMS would carry{RESET}\n")

    # ── Start the service in the background ──────────────
    import uvicorn
    from captcha_service.main import app

    config = uvicorn.Config(app, host=HOST, port=PORT, log_level="warning")
    server = uvicorn.Server(config)
    server_task = asyncio.create_task(server.serve())

    # Give the server a moment to start
    await asyncio.sleep(0.5)

    client = CaptchaClient(base_url=f"http://{HOST}:{PORT}")
    store = app.state.captcha_service.store

    while True:
        try:
            line = input(f"{BLUE}{BOLD}>{RESET} ").strip()
        except (KeyboardInterrupt, EOFError):
            print(f"\n{DIM}Goodbye!{RESET}")
            break

        if not line:
            continue

        command, *args = line.split()
        command = command.lower()

        if command == "quit":
            print(f"{DIM}Goodbye!{RESET}")
            break

        if command == "send" and len(args) == 1:
            result = await client.send_captcha(args[0])
        elif command == "verify" and len(args) == 2:
            result = await client.verify_captcha(args[0], args[1])
        elif command == "peek" and len(args) == 1:
            entry = store.get(args[0])
            if entry is None:
                print(f"{YELLOW}No active code for {args[0]}{RESET}\n")
            else:
                print(f"{YELLOW}Code {entry.code}, expires {entry.expires_at:%H:%M:%S} UTC{RESET}\n")
            continue
        else:
            print(f"{DIM}Unknown command: {line}{RESET}\n")
            continue

        colour = GREEN if result.ok else RED
        print(f"{colour}{BOLD}{result.status_code}{RESET} {result.message}\n")

    # Shut down the background server
    server.should_exit = True
    await server_task


if __name__ == "__main__":
    asyncio.run(main())
