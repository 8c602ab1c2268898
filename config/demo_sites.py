"""
BeachWatch — Demo Workbook

A small copy of the monitoring programme's spreadsheets for the Loreto
bay beaches, used when no spreadsheet key is configured. Sample dates are
stored as "days before today" so the demo always has a mix of fresh and
stale samples:

1. Playa Loreto  — recent, clean
2. Nopoló        — recent, borderline (caution)
3. Juncalito     — recent, after a storm runoff event (unhealthy)
4. Puerto Escondido — last sampled weeks ago (unknown)
5. Isla Coronado — no surveyed location, never drawn on the map
"""

DEMO_SITES = [
    {
        "sitio": "Playa Loreto",
        "latitud": 26.0128,
        "longitud": -111.3415,
        "descripción": "Town beach in front of the malecón. "
                       "Heavy swimmer use on weekends and holidays.",
    },
    {
        "sitio": "Nopoló",
        "latitud": 25.9378,
        "longitud": -111.3560,
        "descripción": "Resort beach south of town, next to the golf course "
                       "irrigation outfall.",
    },
    {
        "sitio": "Juncalito",
        "latitud": 25.8840,
        "longitud": -111.3330,
        "descripción": "Fishing camp beach at the mouth of an arroyo. "
                       "Runoff after summer storms.",
    },
    {
        "sitio": "Puerto Escondido",
        "latitud": 25.8158,
        "longitud": -111.3094,
        "descripción": "Sheltered marina bay. Sampled monthly.",
    },
    {
        "sitio": "Isla Coronado",
        "latitud": None,
        "longitud": None,
        "descripción": "Island beach reached by panga. Location not yet surveyed.",
    },
]

# One entry per sampling event; "dias" is converted to a "fecha" string
DEMO_SAMPLES = [
    {"sitio": "Playa Loreto",     "dias": 30, "enterococos": 140, "temperatura": 24.1, "turbidez": 2.3},
    {"sitio": "Playa Loreto",     "dias": 16, "enterococos": 60,  "temperatura": 25.0, "turbidez": 1.8},
    {"sitio": "Playa Loreto",     "dias": 2,  "enterococos": 20,  "temperatura": 26.4, "turbidez": 1.1},
    {"sitio": "Nopoló",           "dias": 9,  "enterococos": 85,  "temperatura": 25.7, "turbidez": None},
    {"sitio": "Nopoló",           "dias": 3,  "enterococos": 150, "temperatura": 26.2, "turbidez": 3.0},
    {"sitio": "Juncalito",        "dias": 12, "enterococos": 90,  "temperatura": 25.2, "turbidez": 2.0},
    {"sitio": "Juncalito",        "dias": 1,  "enterococos": 410, "temperatura": 27.0, "turbidez": 8.7},
    {"sitio": "Puerto Escondido", "dias": 40, "enterococos": 10,  "temperatura": 22.8, "turbidez": 0.9},
    {"sitio": "Puerto Escondido", "dias": 22, "enterococos": 30,  "temperatura": 23.5, "turbidez": 1.2},
]

# Column name → display label, in display order
DEMO_LABELS = {
    "fecha": "Fecha",
    "enterococos": "Enterococos (NMP/100 mL)",
    "temperatura": "Temperatura (°C)",
    "turbidez": "Turbidez (UNT)",
}
