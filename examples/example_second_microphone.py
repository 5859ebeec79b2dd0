import numpy as np
from ancstream.processor import NoiseCanceller
import ancstream.signal.sources as src
import ancstream.signal.metrics as met

# Voice and a hum that reaches the primary microphone through a short echo path.
# The second microphone only picks up the hum, and is used directly as reference.
samplerate = 8000
block_size = 256
voice = src.WhiteNoiseSource(0.01, rng=np.random.default_rng(1))
hum = src.SineSource(0.5, 50, samplerate)
echo_path = np.array([0.0, 0.6, 0.3])

canceller = NoiseCanceller(block_size, filter_order=8, step_size=0.01)
previous_hum = np.zeros(echo_path.shape[0] - 1)
for block_idx in range(200):
    hum_block = hum.get_samples(block_size)
    hum_at_primary = np.convolve(np.concatenate((previous_hum, hum_block)), echo_path, "valid")
    previous_hum = hum_block[-(echo_path.shape[0] - 1):]

    primary = voice.get_samples(block_size) + hum_at_primary
    processed, metrics = canceller.process(primary, reference=hum_block)
    if block_idx % 20 == 0:
        print(block_idx, met.format_metrics(metrics))
