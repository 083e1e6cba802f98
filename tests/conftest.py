import pytest
import torch

POSITIVE_REVIEWS = [
    "Great movie, I loved it.<br /><br />Wonderful acting and a great story.",
    "Wonderful! A great film, loved every minute.",
    "Loved it. Great cast, great music, wonderful ending.",
    "What a wonderful and great experience, loved it!",
    "Great great great. Loved the wonderful direction.",
    "An excellent, wonderful film. Loved it and would watch again, great.",
]

NEGATIVE_REVIEWS = [
    "Awful movie, I hated it.<br />Terrible acting and a boring story.",
    "Terrible! An awful film, hated every minute.",
    "Hated it. Awful cast, boring music, terrible ending.",
    "What a terrible and awful experience, hated it!",
    "Awful awful awful. Hated the boring direction.",
    "A boring, terrible film. Hated it and would never watch again, awful.",
]


def write_partition(root, partition, positives, negatives):
    for class_dir, reviews in (("pos", positives), ("neg", negatives)):
        path = root / partition / class_dir
        path.mkdir(parents=True, exist_ok=True)
        for idx, review in enumerate(reviews):
            (path / f"{idx}_{7 if class_dir == 'pos' else 2}.txt").write_text(review, encoding="utf-8")


@pytest.fixture
def imdb_dir(tmp_path):
    root = tmp_path / "aclImdb"
    write_partition(root, "train", POSITIVE_REVIEWS, NEGATIVE_REVIEWS)
    write_partition(root, "test", POSITIVE_REVIEWS[:2], NEGATIVE_REVIEWS[:2])
    return root


@pytest.fixture(autouse=True)
def seed():
    torch.manual_seed(0)
