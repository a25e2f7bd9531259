# Thresholds, simulation defaults and API settings for the landscape pipeline.
# Every value here can be overridden from the command line in main.py.

# Co-occurrence network
MIN_COOCCURRENCE = 3   # papers a keyword pair must share to become an edge
MIN_DEGREE = 3         # distinct neighbours a keyword needs to stay in the graph
RANDOM_SEED = 42

# Flow diagrams
TOP_K_YEARLY = 10
TOP_K_DECADAL = 8

# Display
LABEL_MAX_CHARS = 25
NETWORK_LABELS = 20    # most frequent keywords labelled in the network figure
OUTPUT_DIR = "output"

# Simulated corpus
N_PAPERS = 400
YEAR_RANGE = (1990, 2024)
KEYWORDS_PER_PAPER = (2, 6)

KEYWORD_VOCABULARY = [
    "food web", "trophic interaction", "network structure", "modularity",
    "nestedness", "mutualistic network", "pollination", "seed dispersal",
    "phylogenetic signal", "trait evolution", "functional diversity",
    "species richness", "biodiversity", "ecosystem function", "robustness",
    "extinction", "coextinction", "climate change", "invasive species",
    "community assembly", "niche overlap", "body size", "predator prey",
    "host parasite", "interaction strength", "stability", "resilience",
    "metacommunity", "spatial ecology", "macroecology", "bibliometrics",
    "research trends", "keyword analysis", "machine learning",
    "missing data", "imputation", "random forest", "phylogeny",
    "bipartite network", "null model", "connectance", "centrality",
]

# OpenAlex
OPENALEX_API_URL = "https://api.openalex.org/works"
OPENALEX_PER_PAGE = 200
OPENALEX_MAX_RESULTS = 1000
MIN_CONCEPT_SCORE = 0.3
REQUEST_DELAY = 0.1
MAX_RETRIES = 5
RETRY_BACKOFF = [1, 2, 4, 8, 15]
