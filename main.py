# main.py
import json
import sys

from courier_match.app.build import build
from courier_match.domain.errors import NoAvailableAgents
from courier_match.io.config import load_config
from courier_match.io.payloads import dump_assignment, dump_match, parse_agent, parse_request


def run(pool_path: str, config_path: str | None = None) -> int:
    # pool file: {"request": {...}, "agents": [{...}, ...]} in the backend's JSON shape
    with open(pool_path, encoding="utf-8") as f:
        payload = json.load(f)
    cfg = load_config(config_path) if config_path else None
    app = build(cfg)

    request = parse_request(payload["request"])
    agents = [parse_agent(a) for a in payload.get("agents", [])]

    matches = app.engine.find_matches(request, agents)
    for m in matches:
        print(json.dumps(dump_match(m)))
    try:
        print(json.dumps(dump_assignment(app.engine.assign(request, agents))))
    except NoAvailableAgents as exc:
        print(json.dumps({"error": str(exc)}))
        return 1
    return 0


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("usage: main.py POOL_JSON [CONFIG_JSON]", file=sys.stderr)
        sys.exit(2)
    sys.exit(run(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else None))
