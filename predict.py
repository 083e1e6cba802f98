import argparse
from pathlib import Path

import torch
from torch.utils.data import DataLoader

from config import get_device, load_config
from dataset import ReviewDataset, TextVectorizer, clean_text, load_reviews
from model import build_model

SENTIMENT_MAP = {0: "negative", 1: "positive"}


def load_weights(model, path, device):
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Model weights not found: {path}")
    model.load_state_dict(torch.load(path, map_location = device))
    return model


def load_model(config, device):
    """
    Rebuilds the model and its vectorizer from the files written by train.py.
    """
    vectorizer = TextVectorizer.load(config.paths.vocab_path)
    if vectorizer.max_tokens != config.model.max_tokens:
        raise ValueError(
            f"Vocabulary was built with max_tokens={vectorizer.max_tokens}, "
            f"config expects {config.model.max_tokens}"
        )
    if vectorizer.sequence_length != config.model.sequence_length:
        raise ValueError(
            f"Vocabulary was built with sequence_length={vectorizer.sequence_length}, "
            f"config expects {config.model.sequence_length}"
        )
    model = build_model(config.model).to(device)
    load_weights(model, config.paths.model_path, device)
    model.eval()
    return model, vectorizer


def evaluate_model(model, test_loader, device, threshold = 0.5):
    model.eval()                                                                                # Set model to evaluation mode
    correct, total = 0, 0
    with torch.no_grad():                                                                       # Disable gradient computation
        for texts, labels in test_loader:
            texts, labels = texts.to(device), labels.to(device)
            outputs = model(texts)                                                              # Probabilities of the positive class
            predictions = (outputs >= threshold).float()
            correct += (predictions == labels).sum().item()
            total += labels.size(0)
    if total == 0:
        raise ValueError("Cannot evaluate on an empty dataset")
    accuracy = correct / total

    print(f"Validation accuracy: {accuracy * 100:.2f}%")
    return accuracy


def predict_proba(model, vectorizer, texts, device):
    if len(texts) == 0:
        return []
    model.eval()
    token_tensor = vectorizer.encode_batch([clean_text(text) for text in texts]).to(device)
    with torch.no_grad():
        outputs = model(token_tensor)
    return outputs.cpu().tolist()


def predict_text(model, vectorizer, text, device, threshold = 0.5):
    """
    Takes a raw string input, encodes it using the same vocab,
    and returns the predicted sentiment.
    """
    probability = predict_proba(model, vectorizer, [text], device)[0]
    return SENTIMENT_MAP[int(probability >= threshold)]


def visualize_predictions(model, dataset, device, n = 5, threshold = 0.5, shuffle = False):    # Visualize predictions during testing
    model.eval()
    if shuffle:
        indices = torch.randperm(len(dataset))[:n].tolist()                                     # Test reviews are stored grouped by class
    else:
        indices = range(min(n, len(dataset)))
    with torch.no_grad():
        for i in indices:
            token_ids, true_label = dataset[i]                                                  # Get token tensor and true label of given index
            token_ids = token_ids.unsqueeze(0).to(device)                                       # Add batch dimension and move to specified device
            probability = model(token_ids).item()
            pred_label = int(probability >= threshold)

            print(f"Text: {dataset.texts[i][:100]}...")
            print(f"True: {SENTIMENT_MAP[int(true_label.item())]}, Pred: {SENTIMENT_MAP[pred_label]} ({probability:.3f})\n")


def parse_args(argv = None):
    parser = argparse.ArgumentParser(description = "Evaluate the LSTM sentiment model and classify reviews.")
    parser.add_argument("--config", "-c", type = Path, default = None, help = "Path to a YAML config file.")
    parser.add_argument("--data-dir", type = Path, default = None, help = "Override the aclImdb directory.")
    parser.add_argument("--text", "-t", action = "append", default = None,
                        help = "Review to classify; may be repeated. Skips evaluation and interactive mode.")
    return parser.parse_args(argv)


def main(argv = None):
    args = parse_args(argv)
    config = load_config(args.config)
    threshold = config.training.threshold
    device = get_device()
    print(f"Using device: {device}")

    model, vectorizer = load_model(config, device)
    print("Model loaded")

    if args.text:
        for text, probability in zip(args.text, predict_proba(model, vectorizer, args.text, device)):
            print(f"{SENTIMENT_MAP[int(probability >= threshold)]} ({probability:.3f}): {text}")
        return

    df = load_reviews(args.data_dir or config.paths.data_dir, "test")
    dataset = ReviewDataset(df, vectorizer)
    test_loader = DataLoader(dataset,
                             batch_size = config.training.batch_size,
                             shuffle = False
                             )
    evaluate_model(model, test_loader, device, threshold = threshold)
    visualize_predictions(model, dataset, device, threshold = threshold, shuffle = True)

    print("\nSentiment Prediction")
    print("Type a review or 'quit' to exit:")
    while True:
        user_input = input("Enter a review: ").strip()
        if user_input.lower() in {"quit", "exit"}:
            print("Exiting interactive mode.")
            break
        sentiment = predict_text(model, vectorizer, user_input, device, threshold = threshold)
        print(f"Predicted sentiment: {sentiment}\n")


if __name__ == "__main__":
    main()
