import json
import re
import string
from collections import Counter
from pathlib import Path

import pandas as pd
import torch
from torch.utils.data import Dataset

PAD_TOKEN = ""
UNK_TOKEN = "[UNK]"
PARTITIONS = ("train", "test")
CLASS_DIRS = {"pos": "positive", "neg": "negative"}                                              # Directory name -> sentiment label
LABELS = {"positive": 1, "negative": 0}

LINE_BREAK_PATTERN = re.compile(r"<br\s*/?>", flags = re.IGNORECASE)
PUNCTUATION_PATTERN = re.compile(f"[{re.escape(string.punctuation)}]")


def clean_text(text):
    return LINE_BREAK_PATTERN.sub(" ", text)                                                    # Reviews contain raw HTML line breaks


def load_reviews(root, partition = "train"):
    """
    Reads <root>/<partition>/{pos,neg}/*.txt into a DataFrame with
    'review' and 'sentiment' columns, cleaning every review on the way in.
    """
    if partition not in PARTITIONS:
        raise ValueError(f"Unknown partition '{partition}', expected one of {PARTITIONS}")

    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(f"Dataset directory not found: {root}")
    partition_dir = root / partition
    if not partition_dir.is_dir():
        raise FileNotFoundError(f"Partition directory not found: {partition_dir}")

    rows = []
    for class_dir, sentiment in CLASS_DIRS.items():
        path = partition_dir / class_dir
        if not path.is_dir():
            raise FileNotFoundError(f"Class directory not found: {path}")
        for review_file in sorted(path.glob("*.txt")):                                          # Sorted so row order is the same on every machine
            text = review_file.read_text(encoding = "utf-8")
            rows.append({"review": clean_text(text), "sentiment": sentiment})

    if not rows:
        raise ValueError(f"No review files found under {partition_dir}")
    return pd.DataFrame(rows, columns = ["review", "sentiment"])


class TextVectorizer:
    """Turns raw strings into fixed-length sequences of vocabulary ids."""

    def __init__(self, max_tokens = 1000, sequence_length = 100, vocab = None):
        self.max_tokens = max_tokens                                                            # Cap on vocab size, including padding and [UNK]
        self.sequence_length = sequence_length                                                  # Output length for every encoded text
        self.vocab = vocab

    @staticmethod
    def standardize(text):
        return PUNCTUATION_PATTERN.sub("", text.lower())

    def tokenize(self, text):
        return self.standardize(text).split()

    def adapt(self, texts):
        counts = Counter()
        for text in texts:
            counts.update(self.tokenize(text))                                                  # Counter keeps first-seen order for equal counts

        self.vocab = {PAD_TOKEN: 0, UNK_TOKEN: 1}
        for token, _ in counts.most_common(self.max_tokens - len(self.vocab)):
            self.vocab[token] = len(self.vocab)
        return self

    @property
    def vocab_size(self):
        if self.vocab is None:
            raise RuntimeError("TextVectorizer must be adapted before use")
        return len(self.vocab)

    def encode(self, text):
        if self.vocab is None:
            raise RuntimeError("TextVectorizer must be adapted before use")
        unk_id = self.vocab[UNK_TOKEN]
        token_ids = [self.vocab.get(token, unk_id) for token in self.tokenize(text)]            # Unseen words map to [UNK]
        token_ids = token_ids[:self.sequence_length]                                            # Truncate long reviews
        token_ids += [self.vocab[PAD_TOKEN]] * (self.sequence_length - len(token_ids))          # Right-pad short ones
        return torch.tensor(token_ids, dtype = torch.long)

    def encode_batch(self, texts):
        if len(texts) == 0:
            return torch.empty((0, self.sequence_length), dtype = torch.long)
        return torch.stack([self.encode(text) for text in texts])

    def save(self, path):
        path = Path(path)
        path.parent.mkdir(parents = True, exist_ok = True)
        tokens = sorted(self.vocab, key = self.vocab.get)                                       # Stored as a list in id order
        payload = {
            "max_tokens": self.max_tokens,
            "sequence_length": self.sequence_length,
            "vocab": tokens,
        }
        path.write_text(json.dumps(payload, ensure_ascii = False), encoding = "utf-8")

    @classmethod
    def load(cls, path):
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Vocabulary file not found: {path}")
        payload = json.loads(path.read_text(encoding = "utf-8"))
        vocab = {token: idx for idx, token in enumerate(payload["vocab"])}
        return cls(payload["max_tokens"], payload["sequence_length"], vocab = vocab)


class ReviewDataset(Dataset):
    def __init__(self, df, vectorizer):
        self.texts = df["review"].values                                                        # Extract the review text column as a NumPy array
        self.labels = df["sentiment"].map(LABELS).values                                        # Map 'positive' to 1 and 'negative' to 0
        self.vectorizer = vectorizer

    def __len__(self):
        return len(self.texts)                                                                  # Total number of reviews

    def __getitem__(self, idx):
        token_ids = self.vectorizer.encode(self.texts[idx])                                     # Encode the text at index idx
        label = torch.tensor(self.labels[idx], dtype = torch.float)                             # Float label for binary cross-entropy
        return token_ids, label
