# Palette par défaut des labels, indexée par position du label (0, 1, 2, ...).
# Au-delà de la palette, les couleurs sont générées (voir ColorProvider).
# Couleurs des labels avec alpha (format BGRA)
LABEL_COLORS_BGRA = {
    0: (0, 0, 255, 255),
    1: (0, 255, 0, 255),
    2: (255, 0, 0, 255),
    3: (0, 165, 255, 255),
    4: (255, 100, 200, 255),
    5: (100, 255, 100, 255),
    6: (255, 255, 0, 255),
    7: (128, 0, 128, 255),
}

FALLBACK_COLOR_BGRA = (255, 0, 255, 160)  # Magenta semi-transparent

# Opacité appliquée aux couleurs générées
GENERATED_ALPHA = 255

# Brush
DEFAULT_BRUSH_RADIUS = 5
MIN_BRUSH_RADIUS = 0

# Pas d'interpolation entre deux positions de drag (unités de grille)
STROKE_STEP = 1.0

# Modes d'écriture
PAINT_MODE = "paint"
ERASE_MODE = "erase"
BRUSH_MODES = (PAINT_MODE, ERASE_MODE)

# Axe normal au plan d'affichage pour les volumes 3D
DEFAULT_NORMAL_AXIS = 2
