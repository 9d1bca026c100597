"""Static locale key tables used to narrate server events."""

import re
from typing import Dict

PLAYER_JOINED_KEY = "multiplayer.player.joined"
PLAYER_LEFT_KEY = "multiplayer.player.left"
PLAYERS_SKIPPING_NIGHT_KEY = "multiplayer.playersSkippingNight"

DEATH_KEY_PREFIX = "death."

# Templates are formatted with player=parameters[0].
CONNECTION_TEMPLATES: Dict[str, str] = {
    PLAYER_JOINED_KEY: "* [{player}] joined the game.",
    PLAYER_LEFT_KEY: "* [{player}] left the game.",
    PLAYERS_SKIPPING_NIGHT_KEY: "* Players are skipping the night.",
}

DEATH_REASONS: Dict[str, str] = {
    "death.fell.accident.generic": "fell to their death",
    "death.attack.mob": "was killed",
    "death.attack.fall": "fell to their death while trying to escape",
    "death.attack.player": "was killed by player",
    "death.attack.inFire": "burned to death",
    "death.attack.onFire": "burned to death",
    "death.attack.wither": "withered away",
    "death.attack.starve": "starved to death",
    "death.attack.stalagmite": "was impaled by a stalagmite",
    "death.attack.magic": "was killed by magic",
    "death.attack.explosion": "was blown up by an explosion",
    "death.attack.cactus": "was pricked to death",
    "death.attack.lightningBolt": "was struck by lightning",
    "death.attack.dragonBreath": "was killed by dragon breath",
    "death.attack.drown": "drowned",
    "death.attack.dryout": "dried out",
    "death.attack.anvil": "was squashed by a falling anvil",
    "death.attack.fallingBlock": "was squashed by a falling block",
    "death.attack.fallingStalactite": "was impaled by a falling stalactite",
    "death.attack.flyIntoWall": "flew into a wall",
    "death.attack.freeze": "froze to death",
    "death.attack.fireball": "was fireballed to death",
    "death.attack.thorns": "was killed by thorns",
    "death.attack.cramming": "was squished too much",
    "death.attack.trident": "was impaled by a trident",
    "death.attack.potion": "was killed by magic",
    "death.attack.witherSkull": "was killed by a wither skull",
    "death.attack.lava": "was burnt to a crisp whilst fighting",
    "death.attack.generic": "died",
    "death.attack.outOfWorld": "fell out of the world",
    "death.attack.inWall": "suffocated in a wall",
    "death.attack.arrow": "was shot",
    "death.attack.sweetBerry": "was poked to death by a sweet berry bush",
    "death.attack.sonicBoom": "was obliterated by a sonically-charged shriek",
}

KICK_REASONS: Dict[str, str] = {
    "disconnect.kicked": "was kicked from the server",
    "disconnect.timeout": "was disconnected from the server",
    "disconnectionScreen.serverIdConflict": "was already present on the server",
}

_FORMATTING_CODE = re.compile("§.", re.DOTALL)


def normalize_locale_key(raw_message: str) -> str:
    """Strip formatting codes and the leading '%' from a locale key.

    The server sends e.g. "§e%multiplayer.player.joined" for a yellow,
    client-translated join message.
    """
    key = _FORMATTING_CODE.sub("", raw_message).strip()
    if key.startswith("%"):
        key = key[1:]
    return key


def entity_kind(cause: str) -> str:
    """Reduce a cause parameter such as "%entity.zombie.name" to "zombie".

    Player names and other literal causes are returned unchanged.
    """
    kind = cause
    if kind.startswith("%entity."):
        kind = kind[len("%entity.") :]
    elif kind.startswith("entity."):
        kind = kind[len("entity.") :]
    else:
        return cause
    if kind.endswith(".name"):
        kind = kind[: -len(".name")]
    return kind
