#!/usr/bin/env python3
"""Simple client for the stdio server (JSON-RPC over a subprocess pipe).

Usage:
  python -m instagram_mcp.client tools                    # List tools
  python -m instagram_mcp.client call <name> [json-args]  # Call a tool
  python -m instagram_mcp.client prompts                  # List prompts
  python -m instagram_mcp.client prompt <name> [json-args]
  python -m instagram_mcp.client resources                # List resource templates
  python -m instagram_mcp.client read <uri>               # Read a resource
"""
import json
import os
import subprocess
import sys

USAGE = __doc__.split("Usage:", 1)[1]


def send_request(proc, method, params=None, _id=1):
    req = {"jsonrpc": "2.0", "id": _id, "method": method}
    if params is not None:
        req["params"] = params
    proc.stdin.write((json.dumps(req) + "\n").encode())
    proc.stdin.flush()
    # Skip anything that is not the JSON-RPC response to this request (debug lines etc).
    while True:
        line = proc.stdout.readline()
        if not line:
            raise RuntimeError("Server terminated unexpectedly")
        try:
            obj = json.loads(line)
        except json.JSONDecodeError:
            continue
        if isinstance(obj, dict) and obj.get("jsonrpc") == "2.0" and obj.get("id") == _id and (
            "result" in obj or "error" in obj
        ):
            return obj


def spawn_server():
    env = dict(os.environ, MCP_SERVER_QUIET="1")
    return subprocess.Popen(
        [sys.executable, "-m", "instagram_mcp.server"],
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.DEVNULL,
        env=env,
    )


def _arguments(argv, index):
    return json.loads(argv[index]) if len(argv) > index else {}


def run_command(proc, argv):
    """Execute one CLI command against a running server; returns the process exit code."""
    command = argv[0]
    if command == "tools":
        resp = send_request(proc, "tools.list", _id=2)
        for tool in resp.get("result", []):
            print(f"- {tool['name']}: {tool['description']}")
        return 0
    if command == "prompts":
        resp = send_request(proc, "prompts.list", _id=2)
        for prompt in resp.get("result", []):
            args = ", ".join(a["name"] + ("" if a["required"] else "?") for a in prompt["arguments"])
            print(f"- {prompt['name']}({args}): {prompt['description']}")
        return 0
    if command == "resources":
        resp = send_request(proc, "resources.list", _id=2)
        for item in resp.get("result", []):
            print(f"- {item['uriTemplate']} ({item['mimeType']}): {item['name']}")
        return 0
    if command == "call" and len(argv) >= 2:
        resp = send_request(proc, "tools.call", {"name": argv[1], "arguments": _arguments(argv, 2)}, _id=2)
        if "result" in resp:
            for block in resp["result"]["content"]:
                print(block["text"])
            return 0
    elif command == "prompt" and len(argv) >= 2:
        resp = send_request(proc, "prompts.get", {"name": argv[1], "arguments": _arguments(argv, 2)}, _id=2)
        if "result" in resp:
            for message in resp["result"]["messages"]:
                print(message["content"]["text"])
            return 0
    elif command == "read" and len(argv) >= 2:
        resp = send_request(proc, "resources.read", {"uri": argv[1]}, _id=2)
        if "result" in resp:
            for content in resp["result"]["contents"]:
                print(content["text"])
            return 0
    else:
        print("Usage:" + USAGE)
        return 1
    print("Error:", resp["error"]["message"])
    return 1


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print("Usage:" + USAGE)
        return 1
    proc = spawn_server()
    try:
        send_request(proc, "initialize")
        return run_command(proc, argv)
    finally:
        send_request(proc, "shutdown", _id=3)
        proc.stdin.close()
        proc.stdout.close()
        proc.wait()


if __name__ == "__main__":
    sys.exit(main())
