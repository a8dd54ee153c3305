"""Page-side registration script.

The page half of the update handshake: it registers the worker, answers
install_done with skip_waiting, nudges an already-waiting worker, and
reloads once the new worker reports activation_done.
"""

import json

from swgen.protocol.messages import SKIP_WAITING
from swgen.protocol.messages import MessageType

from .templates import fill

CLIENT = """\
if (navigator.serviceWorker) {
    navigator.serviceWorker
        .register(__WORKER_URL__, { scope: __SCOPE__ })
        .then((registration) => {
            function handleMessage(event) {
                if (!(event.source instanceof ServiceWorker)) {
                    return;
                }

                let data;
                try {
                    data = JSON.parse(event.data);
                } catch (err) {
                    console.log("unparsable message", event.data);
                    return;
                }

                switch (data && data.type) {
                    case "__MSG__":
                        console.log(`Message from ${event.source.state} SW: `, ...(data.data || []));
                        break;

                    case "__INSTALL_DONE__":
                        event.source.postMessage("__SKIP_WAITING__");
                        break;

                    case "__ACTIVATION_DONE__":
                        window.location.reload();
                        break;

                    default:
                        console.log("unknown message", data);
                        break;
                }
            }

            registration.onupdatefound = () => {
                if (registration.installing) {
                    registration.installing.onmessage = handleMessage;
                }
            };

            if (registration.waiting) {
                registration.waiting.postMessage("__SKIP_WAITING__");
            }

            navigator.serviceWorker.onmessage = handleMessage;
        });
}
"""


def render_client_script(worker_url: str = "./sw.js", scope: str = "./") -> str:
    """Render the page script that registers the worker and drives updates.

    Args:
        worker_url: Url the page registers the worker from
        scope: Registration scope

    Returns:
        JavaScript source for the page
    """
    return fill(
        CLIENT,
        WORKER_URL=json.dumps(worker_url),
        SCOPE=json.dumps(scope),
        MSG=MessageType.MSG.value,
        INSTALL_DONE=MessageType.INSTALL_DONE.value,
        ACTIVATION_DONE=MessageType.ACTIVATION_DONE.value,
        SKIP_WAITING=SKIP_WAITING,
    )
