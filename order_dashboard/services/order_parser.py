"""
Servicio: Parser de pedidos en texto libre
Convierte el texto que manda el bot de WhatsApp en items estructurados
(tipo de hamburguesa, medallón, combo, agregados y sacados)
"""
import logging
import re
from typing import Dict, List, Optional, Union

logger = logging.getLogger(__name__)

PATTY_SIZES = ("simple", "doble", "triple")

# Separadores entre hamburguesas dentro de un mismo bloque de texto:
# saltos de línea, ";" y comas o "y" seguidos de una nueva cantidad
FRAGMENT_SPLIT = re.compile(r"\n|;|,\s*(?=\d)|\s+y\s+(?=\d)")

QUANTITY_PATTERNS = [
    # "2x ruby", "2 x ruby" (no "2 x-burger")
    re.compile(r"^(\d+)\s*x(?=\s|$)\s*"),
    # "2 ruby"
    re.compile(r"^(\d+)\s+"),
]

SIZE_WORDS = re.compile(r"\b(?:simples?|dobles?|triples?)\b")
COMBO_WORD = re.compile(r"\bcombos?\b")

# Palabras que abren (y cierran) una frase de modificador
MODIFIER_KEYWORDS = re.compile(r"\b(sin|con|agregados?|agregar|extras?|en)\b")
PHRASE_SPLIT = re.compile(r",|\s+y\s+|\s+e\s+")
EDGE_CONNECTORS = re.compile(r"^(?:y|e|de)\s+|\s+(?:y|e|de)$")
LEADING_FILLER = re.compile(r"^(?:hamburguesas?|burgers?)\s+(?:de\s+)?")

# El combo ya incluye papas: "con papas" no es un agregado
COMBO_SIDES = {"papas", "papas fritas", "fritas"}

ADDITION_KEYWORDS = {"agregado", "agregados", "agregar", "extra", "extras"}


def parse_order_text(text: Union[str, List[str], None]) -> Optional[List[Dict]]:
    """
    Parsea el texto de un pedido.

    Acepta un bloque de texto libre o una lista de fragmentos ya separados
    (una hamburguesa por fragmento):

        "2x Ruby Clove doble combo sin cebolla
         1 clásica con cheddar y bacon"

        ["2x Ruby Clove doble combo sin cebolla", "1 clásica extra cheddar"]

    Returns:
        Lista de items con el formato
        {
            "burger_type": str,
            "patty_size": "simple" | "doble" | "triple",
            "combo": bool,
            "additions": [str] | None,
            "removals": [str] | None,
            "quantity": int
        }
        o None cuando ningún fragmento tiene un nombre de hamburguesa reconocible.
    """
    fragments = split_fragments(text)
    items = []

    for fragment in fragments:
        try:
            parsed = parse_fragment(fragment)
        except (re.error, ValueError) as e:
            logger.warning("No se pudo parsear el fragmento %r: %s", fragment, e)
            continue
        if parsed:
            items.append(parsed)

    if not items:
        logger.info("El texto del pedido no produjo items estructurados")
        return None

    return items


def split_fragments(text) -> List[str]:
    """Separa el texto en fragmentos de una hamburguesa cada uno"""
    if isinstance(text, str):
        raw_fragments = FRAGMENT_SPLIT.split(text)
    elif isinstance(text, (list, tuple)):
        raw_fragments = [t for t in text if isinstance(t, str)]
    else:
        return []

    fragments = []
    for fragment in raw_fragments:
        fragment = fragment.strip()
        if fragment.startswith(("-", "•", "*")):
            fragment = fragment.lstrip("-•*").strip()
        if fragment:
            fragments.append(fragment)
    return fragments


def parse_fragment(fragment: str) -> Optional[Dict]:
    """
    Parsea una hamburguesa.

    Formatos soportados:
    - "2x ruby clove doble combo sin cebolla"
    - "2 ruby clove" / "ruby clove" (cantidad 1)
    - "clásica triple con cheddar y bacon"
    - "clásica extra cheddar, sin pepinos"
    - "ruby combo con papas" (las papas del combo no cuentan como agregado)
    """
    text = fragment.strip().lower()
    text = re.sub(r"\s+", " ", text)
    text = re.sub(r"[,.;]\s*$", "", text)

    quantity = 1
    for pattern in QUANTITY_PATTERNS:
        match = pattern.match(text)
        if match:
            quantity = max(int(match.group(1)), 1)
            text = text[match.end():]
            break

    patty_size = detect_patty_size(text)
    combo = COMBO_WORD.search(text) is not None

    # Las palabras de tamaño y combo pueden aparecer en cualquier parte
    text = SIZE_WORDS.sub(" ", text)
    text = COMBO_WORD.sub(" ", text)
    text = re.sub(r"\s+", " ", text).strip()

    name_parts, additions, removals = _split_modifiers(text, combo)

    burger_type = _clean_burger_name(" ".join(name_parts))
    if not burger_type:
        return None

    return {
        "burger_type": burger_type,
        "patty_size": patty_size,
        "combo": combo,
        "additions": additions or None,
        "removals": removals or None,
        "quantity": quantity,
    }


def detect_patty_size(text: str) -> str:
    """triple > doble > simple (por defecto)"""
    if re.search(r"\btriples?\b", text):
        return "triple"
    if re.search(r"\bdobles?\b", text):
        return "doble"
    return "simple"


def _split_modifiers(text, combo):
    """
    Separa el texto en nombre de hamburguesa y frases de modificadores.

    Cada frase empieza en una palabra clave y termina en la siguiente
    o en el final del fragmento.
    """
    matches = list(MODIFIER_KEYWORDS.finditer(text))
    name_parts = [text[:matches[0].start()] if matches else text]
    additions = []
    removals = []

    for index, match in enumerate(matches):
        keyword = match.group(1)
        end = matches[index + 1].start() if index + 1 < len(matches) else len(text)
        phrase = text[match.end():end]

        if keyword == "sin":
            _extend_unique(removals, split_phrase(phrase))
        elif keyword == "con":
            pieces = split_phrase(phrase)
            if combo:
                pieces = [p for p in pieces if p not in COMBO_SIDES]
            _extend_unique(additions, pieces)
        elif keyword in ADDITION_KEYWORDS:
            _extend_unique(additions, split_phrase(phrase))
        else:
            # "en ..." (ej: "en pan de papa") describe la hamburguesa
            name_parts.append(f"{keyword} {phrase}")

    return name_parts, additions, removals


def split_phrase(phrase: str) -> List[str]:
    """'cebolla y tomate, pepinos' -> ['cebolla', 'tomate', 'pepinos']"""
    pieces = []
    for piece in PHRASE_SPLIT.split(phrase):
        piece = piece.strip(" ,.;:-")
        piece = EDGE_CONNECTORS.sub("", piece).strip()
        if piece:
            pieces.append(piece)
    return pieces


def _extend_unique(target, values):
    for value in values:
        if value not in target:
            target.append(value)


def _clean_burger_name(name: str) -> str:
    name = re.sub(r"\s+", " ", name).strip(" ,.;:-")
    name = LEADING_FILLER.sub("", name)
    name = EDGE_CONNECTORS.sub("", name).strip(" ,.;:-")
    # un resto puramente numérico no es una hamburguesa
    if not re.search(r"[^\W\d_]", name):
        return ""
    return name
