"""Revival guard demo with MockAgent.

A bot carrying two totems takes lethal hits over ~5 seconds of simulated
play. The guard reports each pop, re-equips from the spare stack and picks
up a fresh totem dropped by a teammate.

Run:
    uv run python examples/revival-demo/main.py
"""
from __future__ import annotations

from tick_revive import (
    ACTIVATION_SIGNAL,
    ManualScheduler,
    MockAgent,
    install,
)

TOTEM = 1190
TPS = 20

# tick -> (action, argument)
SCRIPT: dict[int, tuple[str, float]] = {
    10: ("health", 6),
    12: ("health", 2),
    13: ("pop", 0),
    14: ("health", 1),
    15: ("health", 9),
    60: ("health", 3),
    61: ("pop", 0),
    62: ("health", 1),
    80: ("pickup", 0),
}


def main() -> None:
    agent = MockAgent(version="1.20.4", items_by_name={"totem_of_undying": TOTEM})
    agent.inventory.put(36, TOTEM, name="totem_of_undying")
    agent.inventory.put(37, TOTEM, name="totem_of_undying")

    scheduler = ManualScheduler()
    guard = install(agent, agent.bus, scheduler, clock=scheduler.time)
    if not guard.enabled:
        print("Revival guard not supported on this agent")
        return

    agent.bus.subscribe(
        ACTIVATION_SIGNAL, lambda name, data: print(f"  !! {name}"),
    )
    guard.on_activation(lambda tick: print(f"  tick {tick}: revival item used"))
    guard.on_equip(lambda strategy: print(f"  equipped via {strategy}"))
    guard.on_failure(
        lambda kind, msg, count: print(f"  {kind} ({count}): {msg}"),
    )

    for tick in range(1, 5 * TPS + 1):
        scheduler.advance(1.0 / TPS)
        agent.tick()

        action = SCRIPT.get(tick)
        if action is None:
            continue
        kind, value = action
        if kind == "health":
            print(f"tick {tick}: health {agent.health:g} -> {value:g}")
            agent.set_health(value)
        elif kind == "pop":
            print(f"tick {tick}: server consumes the held totem")
            agent.inventory.set(45, None)
            agent.entity_status(agent.entity_id, 35)
        elif kind == "pickup":
            print(f"tick {tick}: picked up a totem")
            agent.inventory.put(38, TOTEM, name="totem_of_undying")
            agent.collect()

    held = agent.inventory.get(45)
    print()
    print(f"Offhand: {'totem' if held is not None and held.type == TOTEM else 'empty'}")
    print(f"Equip calls: {len(agent.equip_calls)}")
    guard.unload()


if __name__ == "__main__":
    main()
