import argparse
from pathlib import Path

import torch
from torch.utils.data import DataLoader
from tqdm.auto import tqdm

from config import get_device, load_config
from dataset import ReviewDataset, TextVectorizer, load_reviews
from model import build_model


def train_model(model, train_loader, device, epochs = 10, lr = 0.001, save_path = None, threshold = 0.5):
    if epochs <= 0:
        raise ValueError(f"epochs must be positive, got {epochs}")
    cost_function = torch.nn.BCELoss()                                                          # Model already outputs probabilities
    optimizer = torch.optim.Adam(model.parameters(), lr = lr)
    history = []

    for epoch in range(epochs):
        model.train()                                                                           # Set model to training mode
        loop = tqdm(train_loader, desc = f"Epoch {epoch + 1}")                                  # Progress bar for each epoch
        total_cost, correct, total = 0, 0, 0
        for texts, labels in loop:
            texts, labels = texts.to(device), labels.to(device)                                 # Move batch to specified device
            optimizer.zero_grad()                                                               # Zero gradients
            outputs = model(texts)                                                              # Forward pass
            cost = cost_function(outputs, labels)                                               # Compute loss
            cost.backward()                                                                     # Backpropagate gradients
            optimizer.step()                                                                    # Update parameters to minimize cost
            total_cost += cost.item()                                                           # Accumulate cost
            correct += ((outputs >= threshold).float() == labels).sum().item()
            total += labels.size(0)
            loop.set_postfix(cost = cost.item())                                                # Show current batch loss in progress bar

        if total == 0:
            raise ValueError("Cannot train on an empty dataset")
        average_cost = total_cost / len(train_loader)
        accuracy = correct / total
        history.append({"epoch": epoch + 1, "loss": average_cost, "accuracy": accuracy})
        print(f"Average cost: {average_cost:.4f} - accuracy: {accuracy * 100:.2f}%")

    if save_path:
        save_weights(model, save_path)
    return history


def save_weights(model, path):
    path = Path(path)
    path.parent.mkdir(parents = True, exist_ok = True)
    torch.save(model.state_dict(), path)                                                        # Saves model's parameters (weights and bias) to given path
    print(f"Model saved to {path}")


def parse_args(argv = None):
    parser = argparse.ArgumentParser(description = "Train the LSTM sentiment model on IMDB reviews.")
    parser.add_argument("--config", "-c", type = Path, default = None, help = "Path to a YAML config file.")
    parser.add_argument("--data-dir", type = Path, default = None, help = "Override the aclImdb directory.")
    parser.add_argument("--epochs", type = int, default = None, help = "Override the number of epochs.")
    return parser.parse_args(argv)


def main(argv = None):
    args = parse_args(argv)
    config = load_config(args.config)
    data_dir = args.data_dir or config.paths.data_dir
    epochs = args.epochs if args.epochs is not None else config.training.epochs
    if epochs <= 0:
        raise ValueError(f"--epochs must be positive, got {epochs}")

    device = get_device()
    if device.type == "cuda":
        print(f"CUDA device name: {torch.cuda.get_device_name(torch.cuda.current_device())}")
    print(f"Using device: {device}")
    torch.manual_seed(config.training.seed)

    df = load_reviews(data_dir, "train")
    print(f"Loaded {len(df)} training reviews from {data_dir}")
    vectorizer = TextVectorizer(config.model.max_tokens, config.model.sequence_length)
    vectorizer.adapt(df["review"])                                                              # Vocabulary comes from the training partition only
    vectorizer.save(config.paths.vocab_path)
    print(f"Vocabulary size: {vectorizer.vocab_size}")

    train_loader = DataLoader(
        ReviewDataset(df, vectorizer),
        batch_size = config.training.batch_size,
        shuffle = True,
        )

    model = build_model(config.model).to(device)
    history = train_model(model,
                          train_loader,
                          device,
                          epochs = epochs,
                          lr = config.training.lr,
                          threshold = config.training.threshold,
                          save_path = config.paths.model_path
                          )
    return history


if __name__ == "__main__":
    main()
