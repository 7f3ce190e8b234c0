"""Readability indicators for task descriptions.

The classic English formulas are applied with syllable and common-word
heuristics tuned for Portuguese text, which is what the default keyword
vocabulary targets. Scores are indicative only.
"""
from __future__ import annotations

import math
import re

from storypoints.schemas.readability import ReadabilityLevel, ReadabilityMetrics

COMMON_WORDS = frozenset({
    "a", "e", "o", "as", "os", "um", "uma", "de", "do", "da", "dos", "das",
    "em", "no", "na", "nos", "nas", "para", "por", "com", "sem", "sobre",
    "entre", "até", "desde", "durante", "após", "antes", "depois", "que",
    "qual", "quais", "quando", "onde", "como", "porque", "se", "mas", "ou",
    "nem", "também", "já", "ainda", "sempre", "nunca", "muito", "pouco",
    "mais", "menos", "bem", "mal", "melhor", "pior", "ser", "estar", "ter",
    "haver", "fazer", "ir", "vir", "dar", "ver", "saber", "poder", "querer",
    "dizer", "falar", "pensar", "achar", "ficar", "deixar", "passar",
    "chegar", "sair", "entrar", "eu", "tu", "ele", "ela", "nós", "vós",
    "eles", "elas", "me", "te", "vos", "lhe", "lhes", "meu", "teu", "seu",
    "nosso", "vosso", "minha", "tua", "sua", "nossa", "vossa", "este",
    "esta", "esse", "essa", "aquele", "aquela", "isto", "isso", "aquilo",
    "mesmo", "próprio", "outro", "outra", "todo", "toda", "alguns",
    "algumas", "muitos", "muitas", "poucos", "poucas", "cada", "qualquer",
    "sistema", "dados", "usuário", "função", "método", "classe", "objeto",
    "arquivo", "código", "programa",
})

_non_letter = re.compile(r"[^a-záàâãéêíóôõúç]")
_vowel = re.compile(r"[aeiouáàâãéêíóôõúç]")
_diphthong = re.compile(r"[aeiou][aeiou]")
_sentence_end = re.compile(r"[.!?]+")
_whitespace = re.compile(r"\s+")


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def count_syllables(word: str) -> int:
    word = _non_letter.sub("", word.lower())
    if not word:
        return 0
    if len(word) <= 2:
        return 1

    syllables = float(len(_vowel.findall(word)))
    syllables -= len(_diphthong.findall(word)) * 0.5
    if word.endswith("e") and syllables > 1:
        syllables -= 0.5
    return max(1, _round_half_up(syllables))


def count_sentences(text: str) -> int:
    return len(_sentence_end.findall(text)) or 1


def count_words(text: str) -> int:
    return len(text.split())


def count_difficult_words(text: str) -> int:
    count = 0
    for word in _whitespace.split(text.lower()):
        clean = _non_letter.sub("", word)
        if clean and clean not in COMMON_WORDS:
            count += 1
    return count


def count_total_syllables(text: str) -> int:
    return sum(count_syllables(word) for word in _whitespace.split(text) if word.strip())


def gunning_fog(words: int, sentences: int, complex_words: int) -> float:
    if sentences == 0 or words == 0:
        return 0.0
    return 0.4 * (words / sentences + complex_words / words * 100)


def flesch_reading_ease(words: int, sentences: int, syllables: int) -> float:
    if sentences == 0 or words == 0:
        return 0.0
    return 206.835 - 1.015 * (words / sentences) - 84.6 * (syllables / words)


def flesch_kincaid_grade(words: int, sentences: int, syllables: int) -> float:
    if sentences == 0 or words == 0:
        return 0.0
    return 0.39 * (words / sentences) + 11.8 * (syllables / words) - 15.59


def smog_index(sentences: int, complex_words: int) -> float:
    if sentences == 0:
        return 0.0
    return 1.043 * math.sqrt(complex_words / sentences * 30) + 3.1291


def coleman_liau_index(words: int, sentences: int, characters: int) -> float:
    if words == 0:
        return 0.0
    return 0.0588 * (characters / words * 100) - 0.296 * (sentences / words * 100) - 15.8


def automated_readability_index(words: int, sentences: int, characters: int) -> float:
    if sentences == 0 or words == 0:
        return 0.0
    return 4.71 * (characters / words) + 0.5 * (words / sentences) - 21.43


def dale_chall_score(words: int, sentences: int, difficult_words: int) -> float:
    if sentences == 0 or words == 0:
        return 0.0
    difficult_pct = difficult_words / words * 100
    score = 0.1579 * difficult_pct + 0.0496 * (words / sentences)
    if difficult_pct > 5:
        score += 3.6365
    return score


def linsear_write(words: int, sentences: int, complex_words: int) -> float:
    if sentences == 0 or words == 0:
        return 0.0
    score = ((words - complex_words) + complex_words * 3) / sentences
    return score / 2 if score > 20 else (score - 2) / 2


def calculate_readability_metrics(text: str) -> ReadabilityMetrics:
    if not text or not text.strip():
        return ReadabilityMetrics()

    words = count_words(text)
    sentences = count_sentences(text)
    syllables = count_total_syllables(text)
    characters = len(_whitespace.sub("", text))
    difficult = count_difficult_words(text)
    complex_words = sum(1 for word in _whitespace.split(text) if count_syllables(word) >= 3)

    return ReadabilityMetrics(
        gunning_fog=gunning_fog(words, sentences, complex_words),
        flesch_reading_ease=flesch_reading_ease(words, sentences, syllables),
        flesch_kincaid_grade=flesch_kincaid_grade(words, sentences, syllables),
        smog_index=smog_index(sentences, complex_words),
        coleman_liau_index=coleman_liau_index(words, sentences, characters),
        automated_readability_index=automated_readability_index(words, sentences, characters),
        dale_chall_readability_score=dale_chall_score(words, sentences, difficult),
        difficult_words=difficult,
        linsear_write_formula=linsear_write(words, sentences, complex_words),
        word_count=words,
        sentence_count=sentences,
        syllable_count=syllables,
        character_count=characters,
    )


_READING_EASE_LEVELS = [
    (90, "Very easy", "Easily understood by an average 11-year-old"),
    (80, "Easy", "Easily understood by an average 13-year-old"),
    (70, "Fairly easy", "Easily understood by an average 15-year-old"),
    (60, "Standard", "Easily understood by an average 17-year-old"),
    (50, "Fairly difficult", "Understood by college students"),
    (30, "Difficult", "Understood by college graduates"),
]

_GRADE_LEVELS = [
    (6, "Elementary school"),
    (9, "Middle school"),
    (12, "High school"),
    (16, "College"),
]


def interpret_flesch_reading_ease(score: float) -> ReadabilityLevel:
    for threshold, level, description in _READING_EASE_LEVELS:
        if score >= threshold:
            return ReadabilityLevel(level=level, description=description)
    return ReadabilityLevel(level="Very difficult", description="Understood by postgraduates")


def interpret_flesch_kincaid_grade(grade: float) -> ReadabilityLevel:
    for ceiling, level in _GRADE_LEVELS:
        if grade <= ceiling:
            return ReadabilityLevel(level=level)
    return ReadabilityLevel(level="Postgraduate")
