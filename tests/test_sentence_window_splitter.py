import unittest

from infrastructure.splitting.sentence_window_splitter import (
    SentenceWindowSplitter,
    score_importance,
    split_sentences,
)


def _numbered_text(count: int) -> str:
    # Every sentence has exactly eight words.
    return " ".join(f"Sentence {i} covers topic {i} with extra words." for i in range(count))


class TestSingleChunk(unittest.TestCase):
    def test_short_document_with_title_is_one_full_importance_chunk(self):
        text = "This overview explains how the documentation is organised."
        chunks = SentenceWindowSplitter().split(text, title="Overview", slug="overview")

        self.assertEqual(len(chunks), 1)
        self.assertEqual(chunks[0].id, "overview-chunk-0")
        self.assertEqual(chunks[0].text, text)
        self.assertEqual(chunks[0].start_index, 0)
        self.assertEqual(chunks[0].word_count, 8)
        self.assertEqual(chunks[0].importance, 1.0)

    def test_short_document_without_title(self):
        chunks = SentenceWindowSplitter().split("Just a few words here.")
        self.assertEqual(len(chunks), 1)
        self.assertEqual(chunks[0].importance, 0.8)

    def test_exactly_max_words_stays_single(self):
        text = " ".join(["word"] * 300)
        chunks = SentenceWindowSplitter().split(text, title="Words")
        self.assertEqual(len(chunks), 1)
        self.assertEqual(chunks[0].word_count, 300)


class TestWindowing(unittest.TestCase):
    def setUp(self) -> None:
        self.text = _numbered_text(60)
        self.splitter = SentenceWindowSplitter(max_words=300, overlap_words=50)
        self.chunks = self.splitter.split(self.text, title="Topics", slug="guides/topics")

    def test_produces_several_bounded_chunks(self):
        self.assertGreaterEqual(len(self.chunks), 2)
        for chunk in self.chunks:
            self.assertLessEqual(chunk.word_count, 300)
            self.assertEqual(chunk.word_count, len(chunk.text.split()))
            self.assertGreaterEqual(chunk.importance, 0.0)
            self.assertLessEqual(chunk.importance, 1.0)

    def test_ids_are_slug_and_ordinal(self):
        self.assertEqual(
            [chunk.id for chunk in self.chunks],
            [f"guides/topics-chunk-{i}" for i in range(len(self.chunks))],
        )

    def test_next_chunk_starts_with_overlap_of_previous(self):
        for previous, current in zip(self.chunks, self.chunks[1:]):
            carried = min(50, previous.word_count)
            self.assertEqual(current.text.split()[:carried], previous.text.split()[-carried:])

    def test_start_index_points_at_leading_sentence(self):
        self.assertEqual(self.chunks[0].start_index, 0)
        for previous, current in zip(self.chunks, self.chunks[1:]):
            carried = min(50, previous.word_count)
            leading = " ".join(current.text.split()[carried : carried + 8])
            self.assertTrue(self.text.startswith(leading, current.start_index))
            self.assertGreater(current.start_index, previous.start_index)

    def test_every_sentence_is_covered(self):
        joined = " ".join(chunk.text for chunk in self.chunks)
        for _offset, sentence in split_sentences(self.text):
            self.assertIn(sentence, joined)

    def test_repeated_sentences_get_increasing_offsets(self):
        text = "alpha beta gamma delta epsilon zeta eta theta. " * 60
        chunks = SentenceWindowSplitter(max_words=100, overlap_words=10).split(text)
        offsets = [chunk.start_index for chunk in chunks]
        self.assertGreater(len(chunks), 2)
        self.assertEqual(offsets, sorted(set(offsets)))

    def test_oversized_sentence_is_kept_whole(self):
        long_sentence = " ".join(f"w{i}" for i in range(30))
        text = f"short one. {long_sentence}. tail end."
        chunks = SentenceWindowSplitter(max_words=10, overlap_words=0).split(text)

        self.assertEqual([chunk.text for chunk in chunks], ["short one", long_sentence, "tail end"])
        self.assertEqual(chunks[1].word_count, 30)

    def test_zero_overlap_carries_nothing(self):
        chunks = SentenceWindowSplitter(max_words=40, overlap_words=0).split(_numbered_text(12))
        self.assertTrue(all(chunk.text.startswith("Sentence") for chunk in chunks))

    def test_invalid_parameters(self):
        with self.assertRaises(ValueError):
            SentenceWindowSplitter(max_words=0)
        with self.assertRaises(ValueError):
            SentenceWindowSplitter(overlap_words=-1)


class TestImportance(unittest.TestCase):
    def test_base_score(self):
        self.assertEqual(score_importance("plain words only"), 0.5)

    def test_partial_title_overlap(self):
        self.assertAlmostEqual(score_importance("use async functions", "Async Patterns"), 0.65)

    def test_markers_and_length_are_clamped(self):
        text = "# async patterns `code` " + " ".join(["filler"] * 120)
        self.assertEqual(score_importance(text, "Async Patterns"), 1.0)

    def test_each_marker_never_lowers_the_score(self):
        base = score_importance("some text", "Guide")
        self.assertGreaterEqual(score_importance("some text `x`", "Guide"), base)
        self.assertGreaterEqual(score_importance("some text #", "Guide"), base)
        self.assertGreaterEqual(score_importance("some guide text", "Guide"), base)
        self.assertAlmostEqual(score_importance("some text `x` #"), 0.8)


if __name__ == "__main__":
    unittest.main()
