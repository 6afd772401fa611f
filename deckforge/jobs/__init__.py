from deckforge.jobs.load_cards import load_catalog, run_load

__all__ = ["load_catalog", "run_load"]
