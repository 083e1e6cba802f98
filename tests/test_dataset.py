import pandas as pd
import pytest
import torch

from dataset import (
    PAD_TOKEN,
    UNK_TOKEN,
    ReviewDataset,
    TextVectorizer,
    clean_text,
    load_reviews,
)


def test_clean_text_replaces_html_line_breaks():
    cleaned = clean_text("Great film.<br /><br />Loved it.<br/>Really<BR>")
    assert "<br" not in cleaned.lower()
    assert cleaned.startswith("Great film.  ")


def test_load_reviews_reads_both_classes_in_order(imdb_dir):
    df = load_reviews(imdb_dir, "train")
    assert list(df.columns) == ["review", "sentiment"]
    assert len(df) == 12
    assert df["sentiment"].tolist() == ["positive"] * 6 + ["negative"] * 6
    assert not df["review"].str.contains("<br").any()


def test_load_reviews_test_partition(imdb_dir):
    df = load_reviews(imdb_dir, "test")
    assert df["sentiment"].value_counts().to_dict() == {"positive": 2, "negative": 2}


def test_load_reviews_rejects_unknown_partition(imdb_dir):
    with pytest.raises(ValueError, match="Unknown partition"):
        load_reviews(imdb_dir, "unsup")


def test_load_reviews_missing_directories(tmp_path, imdb_dir):
    with pytest.raises(FileNotFoundError):
        load_reviews(tmp_path / "missing", "train")

    (imdb_dir / "test" / "neg" / "0_2.txt").unlink()
    (imdb_dir / "test" / "neg" / "1_2.txt").unlink()
    (imdb_dir / "test" / "neg").rmdir()
    with pytest.raises(FileNotFoundError, match="Class directory"):
        load_reviews(imdb_dir, "test")


def test_load_reviews_empty_partition(tmp_path):
    for class_dir in ("pos", "neg"):
        (tmp_path / "train" / class_dir).mkdir(parents=True)
    with pytest.raises(ValueError, match="No review files"):
        load_reviews(tmp_path, "train")


def test_vectorizer_reserves_padding_and_unknown():
    vectorizer = TextVectorizer(max_tokens=10, sequence_length=5).adapt(["b a a", "c a b"])
    assert vectorizer.vocab[PAD_TOKEN] == 0
    assert vectorizer.vocab[UNK_TOKEN] == 1
    assert vectorizer.vocab["a"] == 2
    assert vectorizer.vocab["b"] == 3
    assert vectorizer.vocab["c"] == 4


def test_vectorizer_caps_vocabulary_size():
    texts = ["one two three four five six seven eight"]
    vectorizer = TextVectorizer(max_tokens=5, sequence_length=4).adapt(texts)
    assert vectorizer.vocab_size == 5
    assert set(vectorizer.vocab) == {PAD_TOKEN, UNK_TOKEN, "one", "two", "three"}


def test_vectorizer_standardizes_case_and_punctuation():
    vectorizer = TextVectorizer(max_tokens=10, sequence_length=3).adapt(["Great!"])
    assert vectorizer.encode("GREAT.").tolist() == [2, 0, 0]


def test_vectorizer_pads_truncates_and_marks_unknown():
    vectorizer = TextVectorizer(max_tokens=10, sequence_length=4).adapt(["good film"])
    assert vectorizer.encode("good").tolist() == [2, 0, 0, 0]
    assert vectorizer.encode("good bad film good film").tolist() == [2, 1, 3, 2]
    assert vectorizer.encode("").tolist() == [0, 0, 0, 0]


def test_vectorizer_encode_batch_shape():
    vectorizer = TextVectorizer(max_tokens=10, sequence_length=6).adapt(["a b c"])
    batch = vectorizer.encode_batch(["a", "a b c d e f g h"])
    assert batch.shape == (2, 6)
    assert batch.dtype == torch.long


def test_vectorizer_encode_batch_empty():
    vectorizer = TextVectorizer(max_tokens=10, sequence_length=6).adapt(["a b c"])
    batch = vectorizer.encode_batch([])
    assert batch.shape == (0, 6)
    assert batch.dtype == torch.long


def test_vectorizer_requires_adapt():
    vectorizer = TextVectorizer()
    with pytest.raises(RuntimeError):
        vectorizer.encode("hello")
    with pytest.raises(RuntimeError):
        vectorizer.vocab_size


def test_vectorizer_save_and_load(tmp_path):
    vectorizer = TextVectorizer(max_tokens=20, sequence_length=7).adapt(["loved it", "hated it"])
    path = tmp_path / "nested" / "vocab.json"
    vectorizer.save(path)

    restored = TextVectorizer.load(path)
    assert restored.max_tokens == 20
    assert restored.sequence_length == 7
    assert restored.vocab == vectorizer.vocab
    assert torch.equal(restored.encode("loved it"), vectorizer.encode("loved it"))


def test_vectorizer_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        TextVectorizer.load(tmp_path / "vocab.json")


def test_review_dataset_items():
    df = pd.DataFrame({"review": ["loved it", "hated it"], "sentiment": ["positive", "negative"]})
    vectorizer = TextVectorizer(max_tokens=10, sequence_length=3).adapt(df["review"])
    dataset = ReviewDataset(df, vectorizer)

    assert len(dataset) == 2
    token_ids, label = dataset[0]
    assert token_ids.shape == (3,)
    assert label.dtype == torch.float
    assert label.item() == 1.0
    assert dataset[1][1].item() == 0.0
