from pydantic import BaseModel


class ReadabilityMetrics(BaseModel):
    gunning_fog: float = 0
    flesch_reading_ease: float = 0
    flesch_kincaid_grade: float = 0
    smog_index: float = 0
    coleman_liau_index: float = 0
    automated_readability_index: float = 0
    dale_chall_readability_score: float = 0
    difficult_words: int = 0
    linsear_write_formula: float = 0
    word_count: int = 0
    sentence_count: int = 0
    syllable_count: int = 0
    character_count: int = 0


class ReadabilityLevel(BaseModel):
    level: str
    description: str | None = None
