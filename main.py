from __future__ import annotations
import argparse
import json
import os
import sys
from typing import Optional, Dict, Any, List

import requests
from dotenv import load_dotenv
load_dotenv()

# -----------------------------
# Config defaults
# -----------------------------
DEFAULT_BASE_URL = os.getenv("OPTIONS_BOT_BASE_URL", "http://127.0.0.1:8000")
API_PREFIX = "/v1/options/sessions"
CLUE_CATEGORIES = ("wordOfMouth", "newspaper", "charts")

# -----------------------------
# Simple HTTP client helpers
# -----------------------------
def _request(method: str, base_url: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
    url = f"{base_url.rstrip('/')}{path}"
    r = requests.request(method, url, json=payload, timeout=60)
    if r.status_code >= 400:
        print(f"\n[CLIENT] HTTP {r.status_code} from {url}")
        try:
            print("[CLIENT] Body:", r.json())
        except ValueError:
            print("[CLIENT] Body:", r.text[:1000])
        r.raise_for_status()
    if r.status_code == 204:
        return None
    return r.json()

def _post(base_url: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return _request("POST", base_url, path, payload or {})

def _get(base_url: str, path: str) -> Dict[str, Any]:
    return _request("GET", base_url, path)

# -----------------------------
# API wrappers
# -----------------------------
def start_session(base_url: str, mode: Optional[str] = None, seed: Optional[int] = None) -> Dict[str, Any]:
    return _post(base_url, API_PREFIX, {"mode": mode, "seed": seed})

def next_scenario(base_url: str, session_id: str) -> Dict[str, Any]:
    return _post(base_url, f"{API_PREFIX}/{session_id}/scenario")

def view_clue(base_url: str, session_id: str, category: str) -> Optional[Dict[str, Any]]:
    try:
        return _post(base_url, f"{API_PREFIX}/{session_id}/clues/{category}")
    except requests.HTTPError as e:
        if e.response is not None and e.response.status_code == 404:
            return None
        raise

def open_client_file(base_url: str, session_id: str) -> Dict[str, Any]:
    return _post(base_url, f"{API_PREFIX}/{session_id}/client-file")

def submit_decision(base_url: str, session_id: str, decision: str) -> Dict[str, Any]:
    return _post(base_url, f"{API_PREFIX}/{session_id}/decision", {"decision": decision})

def day_report(base_url: str, session_id: str) -> Dict[str, Any]:
    return _get(base_url, f"{API_PREFIX}/{session_id}/day")

def start_next_day(base_url: str, session_id: str) -> Dict[str, Any]:
    return _post(base_url, f"{API_PREFIX}/{session_id}/next-day")

def final_report(base_url: str, session_id: str) -> Dict[str, Any]:
    return _get(base_url, f"{API_PREFIX}/{session_id}/final")

# -----------------------------
# Pretty printers
# -----------------------------
def print_scenario(sc: Dict[str, Any]) -> None:
    print(f"\n===== {sc['title']} =====")
    client = sc.get("client") or {}
    if client:
        print(f"Client:     {client['name']}")
    print(f"\"{sc['opening_statement']}\"")
    print(f"Evidence:   {', '.join(sc['clue_categories']) or '(none)'}")
    print(f"Decisions:  {', '.join(sc['decisions'])}")

def print_decision(res: Dict[str, Any]) -> None:
    trade, a = res["trade"], res["analytics"]
    print(f"\nClient says: {res['reaction']}")
    print(f"Outcome:     {trade['message']} ({trade['reputation_change']:+d} reputation)")
    print(f"Score:       {a['score']}/100 (Grade: {a['grade']}) {'PASSED' if a['passed'] else 'FAILED'}")
    for line in a["feedback"]:
        print(f"  {line}")
    print(f"Reputation:  {res['reputation']}")

def print_day(rep: Dict[str, Any]) -> None:
    an = rep["analytics"]
    print(f"\n===== DAY {rep['day']} SUMMARY =====")
    print(f"Trades:            {len(rep['trades'])}")
    print(f"Reputation change: {rep['reputation_change']:+d}")
    print(f"Reputation:        {rep['final_reputation']}")
    print(f"Day score:         {an['overall_score']} ({an['overall_grade']})")
    for line in an["insights"]:
        print(f"  * {line}")
    print("=" * 28)

def print_final(rep: Dict[str, Any]) -> None:
    print("\n===== FINAL REPORT =====")
    print(json.dumps(rep, indent=2))
    print("=" * 24)

# -----------------------------
# Play loops
# -----------------------------
def _play_client(base_url: str, sid: str, interactive: bool) -> Dict[str, Any]:
    sc = next_scenario(base_url, sid)
    print_scenario(sc)

    if interactive:
        while True:
            cmd = input("\n[c]lue <category> / [f]ile / [d]ecide <call|put|hold>: ").strip().split()
            if not cmd:
                continue
            if cmd[0] in ("c", "clue") and len(cmd) > 1:
                clue = view_clue(base_url, sid, cmd[1])
                print(clue["clue"] if clue else "Nothing there.")
            elif cmd[0] in ("f", "file"):
                print(json.dumps(open_client_file(base_url, sid), indent=2))
            elif cmd[0] in ("d", "decide") and len(cmd) > 1:
                return submit_decision(base_url, sid, cmd[1])
    else:
        for category in CLUE_CATEGORIES:
            if category in sc["clue_categories"]:
                clue = view_clue(base_url, sid, category)
                print(f"[{category}] {clue['clue'] if clue else '-'}")
        if sc.get("client"):
            open_client_file(base_url, sid)
        # Canned strategy: always call when offered.
        decision = "call" if "call" in sc["decisions"] else sc["decisions"][0]
        print(f"\nRecommending: {decision}")
        return submit_decision(base_url, sid, decision)

def play(base_url: str, interactive: bool, mode: Optional[str], seed: Optional[int]) -> None:
    st = start_session(base_url, mode=mode, seed=seed)
    sid = st["session_id"]
    print(f"\n✅ Session started: {sid}")

    while True:
        res = _play_client(base_url, sid, interactive)
        print_decision(res)
        if res["day_complete"]:
            print_day(day_report(base_url, sid))
            st = start_next_day(base_url, sid)
            if st["game_completed"]:
                break

    print_final(final_report(base_url, sid))

# -----------------------------
# Run server (programmatically)
# -----------------------------
def run_server(port: int, host: str = "127.0.0.1", reload: bool = True) -> None:
    import uvicorn
    uvicorn.run("api:app", host=host, port=port, reload=reload)

# -----------------------------
# Health checker
# -----------------------------
def health_check(base_url: str) -> None:
    print(f"🔎 Checking server at {base_url} ...")
    try:
        r = requests.get(f"{base_url.rstrip('/')}/docs", timeout=10)
        r.raise_for_status()
        print("✅ /docs reachable")

        st = start_session(base_url)
        print(f"✅ JSON API ok (session_id={st['session_id']})")
    except requests.RequestException as e:
        print(f"❌ Health check failed: {e}")
        sys.exit(1)

# -----------------------------
# CLI
# -----------------------------
def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Options, Please: server + terminal client in one file")

    sub = p.add_subparsers(dest="cmd", required=True)

    ps = sub.add_parser("serve", help="Start the FastAPI server (uvicorn)")
    ps.add_argument("--port", type=int, default=8000, help="Port to bind")
    ps.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind")
    ps.add_argument("--no-reload", action="store_true", help="Disable auto-reload")

    pp = sub.add_parser("play", help="Play a full game (interactive or auto)")
    pp.add_argument("--base-url", type=str, default=DEFAULT_BASE_URL, help="API base URL")
    pp.add_argument("--mode", choices=["random", "sequential"], default=None, help="Scenario selection mode")
    pp.add_argument("--seed", type=int, default=None, help="Seed for scenario and clue selection")
    pp.add_argument("--auto-demo", action="store_true", help="Run a canned demo instead of prompting")

    ph = sub.add_parser("health", help="Check server availability")
    ph.add_argument("--base-url", type=str, default=DEFAULT_BASE_URL, help="API base URL")

    return p.parse_args(argv)

def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)

    if args.cmd == "serve":
        run_server(port=args.port, host=args.host, reload=(not args.no_reload))
        return

    if args.cmd == "play":
        try:
            requests.get(f"{args.base_url.rstrip('/')}/docs", timeout=5).raise_for_status()
        except requests.RequestException:
            print("⚠️  Could not reach the server. Is it running?\n"
                  "    Start it in another terminal:\n"
                  "    python main.py serve")
            sys.exit(1)

        play(args.base_url, interactive=not args.auto_demo, mode=args.mode, seed=args.seed)
        return

    if args.cmd == "health":
        health_check(args.base_url)
        return

if __name__ == "__main__":
    main()
