import pathlib
from ancstream.session import SessionSetup
import ancstream.signal.sources as src

# Choose where figures should be saved and create a SessionSetup object
fig_path = pathlib.Path(__file__).parent.joinpath("figs")
fig_path.mkdir(exist_ok=True)
setup = SessionSetup(fig_path)
setup.session_info.plot_output = "pdf"

# A tone with a little background noise stands in for the microphone
sr = setup.session_info.samplerate
mic = src.SumSource(
    src.SineSource(0.5, 440, sr),
    src.WhiteNoiseSource(1e-4),
)

session = setup.create_session()
history = session.run(mic, num_blocks=100)
session.stop()
print(f"MSE first block {history.mse[0]:.6f}, last block {history.mse[-1]:.6f}")
