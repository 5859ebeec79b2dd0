import numpy as np
from ancstream.session import SessionSetup
import ancstream.signal.sources as src

setup = SessionSetup()
setup.session_info.block_size = 512
setup.session_info.samplerate = 16000
session = setup.create_session()
session.start()

# Parameter changes behave like slider changes, they are picked up at
# the start of the next block
mic = src.SineSource(0.5, 250, 16000)
for block_idx in range(60):
    if block_idx == 20:
        session.set_step_size(0.05)
    if block_idx == 40:
        session.set_filter_order(8)
    result = session.process(mic.get_samples(512))
    if block_idx % 10 == 0:
        print(block_idx, result.display)

peak_bin = np.argmax(result.spectrum)
print(f"Spectrum peak at {session.analyser.frequencies[peak_bin]:.1f} Hz")
session.stop()
