import torch
import torch.nn as nn


class LSTMSentiment(nn.Module):
    def __init__(self, vocab_size, embed_dim = 64, hidden_dim = 64, dense_dim = 64, bidirectional = True):
        super().__init__()
        self.embedding = nn.Embedding(vocab_size, embed_dim, padding_idx = 0)                  # Embedding layer converts token IDs to embeddings
        self.lstm = nn.LSTM(embed_dim, hidden_dim, batch_first = True, bidirectional = bidirectional)
        lstm_out = hidden_dim * 2 if bidirectional else hidden_dim                              # Forward and backward final states are concatenated
        self.fc = nn.Linear(lstm_out, dense_dim)                                                # Fully connected layer on top of the LSTM
        self.out = nn.Linear(dense_dim, 1)                                                      # Reduce to a single logit

    def forward(self, x):
        x = self.embedding(x)                                                                   # Convert input IDs to embeddings
        _, (fhs, _) = self.lstm(x)                                                              # Final hidden states, one per direction
        if self.lstm.bidirectional:
            hidden = torch.cat((fhs[-2], fhs[-1]), dim = 1)
        else:
            hidden = fhs[-1]
        hidden = torch.relu(self.fc(hidden))
        return torch.sigmoid(self.out(hidden)).squeeze(1)                                       # Probability that each review is positive


def build_model(model_config):
    return LSTMSentiment(
        model_config.max_tokens,                                                                # Sized by the cap so a saved model always reloads
        embed_dim = model_config.embed_dim,
        hidden_dim = model_config.hidden_dim,
        dense_dim = model_config.dense_dim,
        bidirectional = model_config.bidirectional,
    )
