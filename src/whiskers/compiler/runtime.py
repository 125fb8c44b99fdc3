"""Structural assembly of the JavaScript runtime support object.

The generated program starts with ``window.scratchRuntime``: shared
state, runtime methods (events, broadcasts, variables, lists, sound,
clones) and ``spriteMethods``, the prototype every sprite object is
created from.  ``RuntimeBuilder`` keeps each method as a separate
``Method`` fragment and renders them in one pass, so optional features
add fragments instead of editing already generated text.

Motion methods finish by calling ``runPostMoveHooks``.  Pen support is
one such hook plus its pen methods, registered by ``enable_pen``.
"""
from __future__ import annotations

import textwrap
from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class Method:
    """One JavaScript method of an object literal.

    Parameters
    ----------
    name:
        Property name.
    params:
        Parameter list as written between the parentheses.
    body:
        Method body; common leading indentation is removed.
    is_async:
        Emit an ``async function``.
    """

    name: str
    params: str
    body: str
    is_async: bool = False

    def render(self, indent: str, step: str) -> list[str]:
        """Render as ``name: function(params) { ... },`` lines."""
        keyword = "async function" if self.is_async else "function"
        lines = [f"{indent}{self.name}: {keyword}({self.params}) {{"]
        for line in textwrap.dedent(self.body).strip("\n").splitlines():
            lines.append(f"{indent}{step}{line}" if line.strip() else "")
        lines.append(f"{indent}}},")
        return lines


def _methods(*items: Method) -> dict[str, Method]:
    return {m.name: m for m in items}


# ---------------------------------------------------------------------------
# Shared state
# ---------------------------------------------------------------------------

RUNTIME_FIELDS: Final[tuple[tuple[str, str], ...]] = (
    ("sprites", "{}"),
    ("stage", "{ width: 480, height: 360, currentBackdrop: 0, backdrops: ['backdrop1'], volume: 100 }"),
    ("variables", "{}"),
    ("lists", "{}"),
    ("procedures", "{}"),
    ("events", "{}"),
    ("broadcasts", "{}"),
    ("greenFlagHandlers", "[]"),
    ("answer", "''"),
    ("running", "false"),
    ("clones", "[]"),
    ("cloneCount", "0"),
    ("timerStart", "Date.now()"),
    ("mouse", "{ x: 0, y: 0, down: false }"),
    ("pressedKeys", "{}"),
    ("loudness", "0"),
    ("variableDisplays", "{}"),
)

# ---------------------------------------------------------------------------
# Runtime methods
# ---------------------------------------------------------------------------

CORE_METHODS: Final[dict[str, Method]] = _methods(
    Method("log", "message", """
        console.log(message);
        const output = document.getElementById('console');
        if (output) {
            const line = document.createElement('div');
            line.textContent = String(message);
            output.appendChild(line);
            output.scrollTop = output.scrollHeight;
        }
    """),
    Method("initSprite", "name, options", """
        options = options || {};
        const sprite = Object.create(this.spriteMethods);
        Object.assign(sprite, {
            name: name,
            x: 0,
            y: 0,
            direction: 90,
            visible: !options.isStage,
            size: 100,
            rotationStyle: 'all around',
            costumes: options.costumes && options.costumes.length ? options.costumes.slice() : ['costume1'],
            currentCostume: 0,
            sounds: options.sounds || [],
            effects: {},
            isStage: !!options.isStage,
            isClone: !!options.isClone,
            layer: Object.keys(this.sprites).length,
            element: null
        });
        if (sprite.isStage && options.costumes && options.costumes.length) {
            this.stage.backdrops = options.costumes.slice();
        }
        this.sprites[name] = sprite;
        this.render(sprite);
        return sprite;
    """),
    Method("render", "sprite", """
        const stage = document.getElementById('stage');
        if (!stage || sprite.isStage) return;
        if (!sprite.element) {
            sprite.element = document.createElement('div');
            sprite.element.className = 'sprite';
            sprite.element.dataset.sprite = sprite.name;
            stage.appendChild(sprite.element);
        }
        const el = sprite.element;
        const scale = sprite.size / 100;
        const flip = sprite.rotationStyle === 'left-right' && sprite.direction < 0 ? -1 : 1;
        const rotation = sprite.rotationStyle === 'all around' ? sprite.direction - 90 : 0;
        el.textContent = sprite.costumeName();
        el.style.display = sprite.visible ? 'flex' : 'none';
        el.style.left = (this.stage.width / 2 + sprite.x) + 'px';
        el.style.top = (this.stage.height / 2 - sprite.y) + 'px';
        el.style.transform = 'translate(-50%, -50%) rotate(' + rotation + 'deg) scale(' + (flip * scale) + ', ' + scale + ')';
        el.style.opacity = String(1 - Math.min(100, Math.max(0, sprite.effects.ghost || 0)) / 100);
        el.style.filter = 'hue-rotate(' + ((sprite.effects.color || 0) * 1.8) + 'deg) brightness(' + (100 + (sprite.effects.brightness || 0)) + '%)';
        el.style.zIndex = String(sprite.layer);
    """),
    Method("showBubble", "sprite, message, isThought", """
        const stage = document.getElementById('stage');
        const old = document.getElementById('bubble-' + sprite.name);
        if (old) old.remove();
        if (!stage || message === '' || message === undefined) return;
        const bubble = document.createElement('div');
        bubble.id = 'bubble-' + sprite.name;
        bubble.className = isThought ? 'bubble thought' : 'bubble';
        bubble.textContent = String(message);
        bubble.style.left = (this.stage.width / 2 + sprite.x + 20) + 'px';
        bubble.style.top = (this.stage.height / 2 - sprite.y - 60) + 'px';
        stage.appendChild(bubble);
    """),
    Method("targetPosition", "target, sprite", """
        const name = String(target);
        if (name === 'mouse-pointer') return { x: this.mouse.x, y: this.mouse.y };
        if (name === 'random' || name === 'random position') {
            return {
                x: Math.round(Math.random() * this.stage.width - this.stage.width / 2),
                y: Math.round(Math.random() * this.stage.height - this.stage.height / 2)
            };
        }
        const other = this.sprites[name];
        if (other && other !== sprite) return { x: other.x, y: other.y };
        return null;
    """),
    Method("runPostMoveHooks", "sprite", """
        this.postMoveHooks.forEach(function(hook) { hook(sprite); });
    """),
    Method("runScript", "handler", """
        const self = this;
        return Promise.resolve()
            .then(function() { return handler(); })
            .catch(function(error) { self.log('Error: ' + error.message); });
    """),
)

EVENT_METHODS: Final[dict[str, Method]] = _methods(
    Method("onGreenFlag", "handler", """
        this.greenFlagHandlers.push(handler);
    """),
    Method("greenFlag", "", """
        this.stopAll();
        this.running = true;
        this.timerStart = Date.now();
        const self = this;
        this.greenFlagHandlers.forEach(function(handler) { self.runScript(handler); });
    """),
    Method("stopAll", "", """
        this.running = false;
        this.stopAllSounds();
        const self = this;
        this.clones.slice().forEach(function(name) { self.deleteClone(name); });
    """),
    Method("onEvent", "event, handler", """
        (this.events[event] = this.events[event] || []).push(handler);
    """),
    Method("fire", "event", """
        const self = this;
        const handlers = this.events[event] || [];
        if (handlers.length) this.running = true;
        return Promise.all(handlers.map(function(handler) { return self.runScript(handler); }));
    """),
    Method("onBroadcast", "message, handler", """
        const key = String(message);
        (this.broadcasts[key] = this.broadcasts[key] || []).push(handler);
    """),
    Method("broadcast", "message", """
        const self = this;
        (this.broadcasts[String(message)] || []).forEach(function(handler) { self.runScript(handler); });
    """),
    Method("broadcastAndWait", "message", """
        const self = this;
        const handlers = this.broadcasts[String(message)] || [];
        await Promise.all(handlers.map(function(handler) { return self.runScript(handler); }));
        await this.wait(0.05);
    """, is_async=True),
    Method("wait", "seconds", """
        return new Promise(function(resolve) { setTimeout(resolve, Number(seconds) * 1000); });
    """),
)

SENSING_METHODS: Final[dict[str, Method]] = _methods(
    Method("ask", "question", """
        const self = this;
        this.log(String(question));
        return new Promise(function(resolve) {
            const output = document.getElementById('console');
            if (!output) {
                self.answer = window.prompt(String(question)) || '';
                resolve();
                return;
            }
            const input = document.createElement('input');
            input.className = 'ask';
            output.appendChild(input);
            input.focus();
            input.addEventListener('keydown', function(e) {
                if (e.key !== 'Enter') return;
                self.answer = input.value;
                input.remove();
                self.log('> ' + self.answer);
                resolve();
            });
        });
    """),
    Method("getTimer", "", """
        return (Date.now() - this.timerStart) / 1000;
    """),
    Method("resetTimer", "", """
        this.timerStart = Date.now();
    """),
    Method("keyName", "event", """
        const names = { ' ': 'space', 'ArrowUp': 'up arrow', 'ArrowDown': 'down arrow',
                        'ArrowLeft': 'left arrow', 'ArrowRight': 'right arrow', 'Enter': 'enter' };
        return names[event.key] || event.key.toLowerCase();
    """),
    Method("isKeyPressed", "key", """
        const name = String(key).toLowerCase();
        if (name === 'any') return Object.keys(this.pressedKeys).length > 0;
        return !!this.pressedKeys[name];
    """),
    Method("getUsername", "", """
        return '';
    """),
    Method("pickRandom", "low, high", """
        const a = Math.min(low, high);
        const b = Math.max(low, high);
        if (Number.isInteger(a) && Number.isInteger(b)) {
            return a + Math.floor(Math.random() * (b - a + 1));
        }
        return a + Math.random() * (b - a);
    """),
)

DATA_METHODS: Final[dict[str, Method]] = _methods(
    Method("setVariable", "name, value", """
        this.variables[name] = value;
        this.updateVariableDisplay(name);
    """),
    Method("changeVariable", "name, delta", """
        this.setVariable(name, (Number(this.variables[name]) || 0) + delta);
    """),
    Method("showVariable", "name", """
        const stage = document.getElementById('stage');
        if (!stage) return;
        let display = this.variableDisplays[name];
        if (!display) {
            display = document.createElement('div');
            display.className = 'variable';
            display.style.top = (6 + 26 * Object.keys(this.variableDisplays).length) + 'px';
            this.variableDisplays[name] = display;
            stage.appendChild(display);
        }
        display.style.display = 'block';
        this.updateVariableDisplay(name);
    """),
    Method("hideVariable", "name", """
        const display = this.variableDisplays[name];
        if (display) display.style.display = 'none';
    """),
    Method("updateVariableDisplay", "name", """
        const display = this.variableDisplays[name];
        if (display) display.textContent = name + ': ' + this.variables[name];
    """),
    Method("list", "name", """
        return this.lists[name] = this.lists[name] || [];
    """),
    Method("addToList", "name, item", """
        this.list(name).push(item);
    """),
    Method("deleteOfList", "name, index", """
        const items = this.list(name);
        if (index >= 1 && index <= items.length) items.splice(index - 1, 1);
    """),
    Method("deleteAllOfList", "name", """
        this.list(name).length = 0;
    """),
    Method("insertAtList", "name, index, item", """
        const items = this.list(name);
        if (index >= 1 && index <= items.length + 1) items.splice(index - 1, 0, item);
    """),
    Method("replaceItemOfList", "name, index, item", """
        const items = this.list(name);
        if (index >= 1 && index <= items.length) items[index - 1] = item;
    """),
    Method("itemOfList", "name, index", """
        const items = this.list(name);
        return index >= 1 && index <= items.length ? items[index - 1] : '';
    """),
    Method("lengthOfList", "name", """
        return this.list(name).length;
    """),
    Method("listContains", "name, item", """
        const wanted = String(item).toLowerCase();
        return this.list(name).some(function(value) { return String(value).toLowerCase() === wanted; });
    """),
)

LOOKS_SOUND_METHODS: Final[dict[str, Method]] = _methods(
    Method("switchBackdrop", "backdrop", """
        const names = this.stage.backdrops;
        let index = typeof backdrop === 'number' ? backdrop - 1 : names.findIndex(function(n) {
            return n.toLowerCase() === String(backdrop).toLowerCase();
        });
        if (index < 0 || index >= names.length) return;
        this.stage.currentBackdrop = index;
        this.fire('backdropSwitch_' + names[index]);
    """),
    Method("nextBackdrop", "", """
        this.switchBackdrop((this.stage.currentBackdrop + 1) % this.stage.backdrops.length + 1);
    """),
    Method("backdropName", "", """
        return this.stage.backdrops[this.stage.currentBackdrop];
    """),
    Method("playSound", "name", """
        this.log('Playing sound: ' + name + ' (volume ' + this.stage.volume + '%)');
    """),
    Method("playSoundUntilDone", "name", """
        this.playSound(name);
        await this.wait(0.5);
    """, is_async=True),
    Method("stopAllSounds", "", """
        return;
    """),
    Method("setVolume", "volume", """
        this.stage.volume = Math.max(0, Math.min(100, volume));
    """),
    Method("changeVolume", "delta", """
        this.setVolume(this.stage.volume + delta);
    """),
)

CLONE_METHODS: Final[dict[str, Method]] = _methods(
    Method("createClone", "name", """
        const parent = this.sprites[name];
        if (!parent) return;
        this.cloneCount += 1;
        const cloneName = name + '#' + this.cloneCount;
        const clone = this.initSprite(cloneName, { costumes: parent.costumes, sounds: parent.sounds, isClone: true });
        ['x', 'y', 'direction', 'size', 'visible', 'rotationStyle', 'currentCostume'].forEach(function(key) {
            clone[key] = parent[key];
        });
        clone.effects = Object.assign({}, parent.effects);
        this.clones.push(cloneName);
        this.render(clone);
        this.fire('cloneStart_' + name);
    """),
    Method("deleteClone", "name", """
        const clone = this.sprites[name];
        if (!clone || !clone.isClone) return;
        if (clone.element) clone.element.remove();
        delete this.sprites[name];
        this.clones = this.clones.filter(function(n) { return n !== name; });
    """),
)

INIT_METHOD: Final[Method] = Method("init", "", """
    const self = this;
    const stage = document.getElementById('stage');
    Object.keys(this.sprites).forEach(function(name) { self.render(self.sprites[name]); });
    document.addEventListener('mousemove', function(e) {
        if (!stage) return;
        const rect = stage.getBoundingClientRect();
        self.mouse.x = Math.round(e.clientX - rect.left - rect.width / 2);
        self.mouse.y = Math.round(rect.height / 2 - (e.clientY - rect.top));
    });
    document.addEventListener('mousedown', function() { self.mouse.down = true; });
    document.addEventListener('mouseup', function() { self.mouse.down = false; });
    document.addEventListener('keydown', function(e) {
        if (e.target && e.target.tagName === 'INPUT') return;
        const key = self.keyName(e);
        self.pressedKeys[key] = true;
        self.fire('keyPressed_' + key);
        self.fire('keyPressed_any');
    });
    document.addEventListener('keyup', function(e) {
        delete self.pressedKeys[self.keyName(e)];
    });
    if (stage) {
        stage.addEventListener('click', function(e) {
            const target = e.target.closest ? e.target.closest('.sprite') : null;
            if (target) self.fire('spriteClicked_' + target.dataset.sprite.split('#')[0]);
        });
    }
    const flag = document.getElementById('green-flag');
    if (flag) flag.addEventListener('click', function() { self.greenFlag(); });
    const stop = document.getElementById('stop');
    if (stop) stop.addEventListener('click', function() { self.stopAll(); });
""")

# ---------------------------------------------------------------------------
# Sprite methods
# ---------------------------------------------------------------------------

MOTION_METHODS: Final[dict[str, Method]] = _methods(
    Method("goTo", "x, y", """
        this.x = Number(x);
        this.y = Number(y);
        scratchRuntime.render(this);
        scratchRuntime.runPostMoveHooks(this);
    """),
    Method("move", "steps", """
        const radians = (90 - this.direction) * Math.PI / 180;
        this.goTo(this.x + steps * Math.cos(radians), this.y + steps * Math.sin(radians));
    """),
    Method("pointInDirection", "direction", """
        let d = Number(direction) % 360;
        if (d > 180) d -= 360;
        if (d <= -180) d += 360;
        this.direction = d;
        scratchRuntime.render(this);
    """),
    Method("turnRight", "degrees", """
        this.pointInDirection(this.direction + degrees);
    """),
    Method("turnLeft", "degrees", """
        this.pointInDirection(this.direction - degrees);
    """),
    Method("pointTowards", "target", """
        const position = scratchRuntime.targetPosition(target, this);
        if (!position) return;
        const dx = position.x - this.x;
        const dy = position.y - this.y;
        this.pointInDirection(Math.atan2(dx, dy) * 180 / Math.PI);
    """),
    Method("goToTarget", "target", """
        const position = scratchRuntime.targetPosition(target, this);
        if (position) this.goTo(position.x, position.y);
    """),
    Method("glide", "seconds, x, y", """
        const self = this;
        const startX = this.x;
        const startY = this.y;
        const duration = Math.max(0, seconds * 1000);
        const start = Date.now();
        return new Promise(function(resolve) {
            (function step() {
                const progress = duration === 0 ? 1 : Math.min((Date.now() - start) / duration, 1);
                self.goTo(startX + (x - startX) * progress, startY + (y - startY) * progress);
                if (progress < 1) {
                    setTimeout(step, 16);
                } else {
                    resolve();
                }
            })();
        });
    """),
    Method("glideTo", "seconds, target", """
        const position = scratchRuntime.targetPosition(target, this);
        if (position) await this.glide(seconds, position.x, position.y);
    """, is_async=True),
    Method("setX", "x", """
        this.goTo(x, this.y);
    """),
    Method("setY", "y", """
        this.goTo(this.x, y);
    """),
    Method("changeX", "dx", """
        this.goTo(this.x + dx, this.y);
    """),
    Method("changeY", "dy", """
        this.goTo(this.x, this.y + dy);
    """),
    Method("ifOnEdgeBounce", "", """
        const halfWidth = scratchRuntime.stage.width / 2;
        const halfHeight = scratchRuntime.stage.height / 2;
        let x = this.x;
        let y = this.y;
        if (Math.abs(x) > halfWidth) {
            this.pointInDirection(-this.direction);
            x = Math.sign(x) * halfWidth;
        }
        if (Math.abs(y) > halfHeight) {
            this.pointInDirection(180 - this.direction);
            y = Math.sign(y) * halfHeight;
        }
        if (x !== this.x || y !== this.y) this.goTo(x, y);
    """),
    Method("setRotationStyle", "style", """
        this.rotationStyle = String(style).replace('-', ' ') === 'left right' ? 'left-right' : String(style);
        scratchRuntime.render(this);
    """),
)

APPEARANCE_METHODS: Final[dict[str, Method]] = _methods(
    Method("say", "message", """
        scratchRuntime.showBubble(this, message, false);
        if (message !== '') scratchRuntime.log(this.name + ': ' + message);
    """),
    Method("sayFor", "message, seconds", """
        this.say(message);
        await scratchRuntime.wait(seconds);
        this.say('');
    """, is_async=True),
    Method("think", "message", """
        scratchRuntime.showBubble(this, message, true);
    """),
    Method("thinkFor", "message, seconds", """
        this.think(message);
        await scratchRuntime.wait(seconds);
        this.think('');
    """, is_async=True),
    Method("show", "", """
        this.visible = true;
        scratchRuntime.render(this);
    """),
    Method("hide", "", """
        this.visible = false;
        scratchRuntime.render(this);
    """),
    Method("costumeName", "", """
        return this.costumes[this.currentCostume];
    """),
    Method("switchCostume", "costume", """
        let index = typeof costume === 'number' ? costume - 1 : this.costumes.findIndex(function(n) {
            return n.toLowerCase() === String(costume).toLowerCase();
        });
        if (index < 0 || index >= this.costumes.length) return;
        this.currentCostume = index;
        scratchRuntime.render(this);
    """),
    Method("nextCostume", "", """
        this.currentCostume = (this.currentCostume + 1) % this.costumes.length;
        scratchRuntime.render(this);
    """),
    Method("setSize", "size", """
        this.size = Math.max(5, size);
        scratchRuntime.render(this);
    """),
    Method("changeSize", "delta", """
        this.setSize(this.size + delta);
    """),
    Method("setEffect", "effect, value", """
        this.effects[String(effect).toLowerCase()] = value;
        scratchRuntime.render(this);
    """),
    Method("changeEffect", "effect, delta", """
        const name = String(effect).toLowerCase();
        this.setEffect(name, (this.effects[name] || 0) + delta);
    """),
    Method("clearEffects", "", """
        this.effects = {};
        scratchRuntime.render(this);
    """),
    Method("goToFrontLayer", "", """
        const layers = Object.values(scratchRuntime.sprites).map(function(s) { return s.layer; });
        this.layer = Math.max.apply(null, layers) + 1;
        scratchRuntime.render(this);
    """),
    Method("goToBackLayer", "", """
        const layers = Object.values(scratchRuntime.sprites).map(function(s) { return s.layer; });
        this.layer = Math.min.apply(null, layers) - 1;
        scratchRuntime.render(this);
    """),
    Method("goForwardLayers", "n", """
        this.layer += n;
        scratchRuntime.render(this);
    """),
    Method("goBackwardLayers", "n", """
        this.layer -= n;
        scratchRuntime.render(this);
    """),
)

SENSING_SPRITE_METHODS: Final[dict[str, Method]] = _methods(
    Method("distanceTo", "target", """
        const position = scratchRuntime.targetPosition(target, this);
        if (!position) return 0;
        return Math.sqrt(Math.pow(position.x - this.x, 2) + Math.pow(position.y - this.y, 2));
    """),
    Method("isTouching", "target", """
        const name = String(target);
        if (name === 'edge') {
            return Math.abs(this.x) >= scratchRuntime.stage.width / 2 - 20 ||
                Math.abs(this.y) >= scratchRuntime.stage.height / 2 - 20;
        }
        if (name === 'mouse-pointer') return this.distanceTo(name) < 25 * this.size / 100;
        const other = scratchRuntime.sprites[name];
        return !!other && other.visible && this.distanceTo(name) < 40;
    """),
    Method("isTouchingColor", "color", """
        return false;
    """),
)

# ---------------------------------------------------------------------------
# Pen support
# ---------------------------------------------------------------------------

PEN_RUNTIME_METHODS: Final[dict[str, Method]] = _methods(
    Method("penContext", "", """
        let canvas = document.getElementById('pen');
        const stage = document.getElementById('stage');
        if (!canvas) {
            if (!stage) return null;
            canvas = document.createElement('canvas');
            canvas.id = 'pen';
            canvas.width = this.stage.width;
            canvas.height = this.stage.height;
            stage.insertBefore(canvas, stage.firstChild);
        }
        return canvas.getContext('2d');
    """),
    Method("clearPen", "", """
        const ctx = this.penContext();
        if (ctx) ctx.clearRect(0, 0, this.stage.width, this.stage.height);
    """),
)

PEN_SPRITE_METHODS: Final[dict[str, Method]] = _methods(
    Method("penDown", "", """
        this.penIsDown = true;
        this.lastPenX = this.x;
        this.lastPenY = this.y;
        this.updatePenDrawing();
    """),
    Method("penUp", "", """
        this.penIsDown = false;
    """),
    Method("setPenColor", "color", """
        this.penColor = String(color);
    """),
    Method("setPenSize", "size", """
        this.penSize = Math.max(1, size);
    """),
    Method("changePenSize", "delta", """
        this.setPenSize((this.penSize || 1) + delta);
    """),
    Method("stamp", "", """
        const ctx = scratchRuntime.penContext();
        if (!ctx) return;
        ctx.fillStyle = this.penColor || '#4c97ff';
        ctx.font = '12px sans-serif';
        ctx.fillText(this.costumeName(), scratchRuntime.stage.width / 2 + this.x, scratchRuntime.stage.height / 2 - this.y);
    """),
    Method("updatePenDrawing", "", """
        if (!this.penIsDown) return;
        const ctx = scratchRuntime.penContext();
        if (!ctx) return;
        const cx = scratchRuntime.stage.width / 2;
        const cy = scratchRuntime.stage.height / 2;
        ctx.strokeStyle = this.penColor || '#4c97ff';
        ctx.lineWidth = this.penSize || 1;
        ctx.lineCap = 'round';
        ctx.beginPath();
        ctx.moveTo(cx + this.lastPenX, cy - this.lastPenY);
        ctx.lineTo(cx + this.x, cy - this.y);
        ctx.stroke();
        this.lastPenX = this.x;
        this.lastPenY = this.y;
    """),
)

PEN_POST_MOVE_HOOK: Final[str] = "function(sprite) { sprite.updatePenDrawing(); }"


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class RuntimeBuilder:
    """Collects runtime fragments and renders the ``scratchRuntime`` object.

    Parameters
    ----------
    indent_width:
        Spaces per indentation level in the rendered JavaScript.

    Example
    -------
    ::

        builder = RuntimeBuilder()
        builder.enable_pen()
        js = builder.build()
    """

    def __init__(self, indent_width: int = 4) -> None:
        self._step = " " * indent_width
        self._fields: dict[str, str] = dict(RUNTIME_FIELDS)
        self._methods: dict[str, Method] = {
            **CORE_METHODS,
            **EVENT_METHODS,
            **SENSING_METHODS,
            **DATA_METHODS,
            **LOOKS_SOUND_METHODS,
            **CLONE_METHODS,
        }
        self._sprite_methods: dict[str, Method] = {
            **MOTION_METHODS,
            **APPEARANCE_METHODS,
            **SENSING_SPRITE_METHODS,
        }
        self._post_move_hooks: list[str] = []
        self._pen_enabled = False

    @property
    def pen_enabled(self) -> bool:
        return self._pen_enabled

    @property
    def post_move_hooks(self) -> tuple[str, ...]:
        return tuple(self._post_move_hooks)

    def add_method(self, method: Method) -> None:
        """Add or replace a runtime method."""
        self._methods[method.name] = method

    def add_sprite_method(self, method: Method) -> None:
        """Add or replace a method on every sprite."""
        self._sprite_methods[method.name] = method

    def add_post_move_hook(self, hook: str) -> None:
        """Register a JavaScript ``function(sprite)`` run after every move."""
        if hook not in self._post_move_hooks:
            self._post_move_hooks.append(hook)

    def has_sprite_method(self, name: str) -> bool:
        return name in self._sprite_methods

    def enable_pen(self) -> bool:
        """Add pen support; return False if it was already added."""
        if self._pen_enabled:
            return False
        for method in PEN_RUNTIME_METHODS.values():
            self.add_method(method)
        for method in PEN_SPRITE_METHODS.values():
            self.add_sprite_method(method)
        self.add_post_move_hook(PEN_POST_MOVE_HOOK)
        self._pen_enabled = True
        return True

    def build(self) -> str:
        """Render the complete runtime support code."""
        one, two = self._step, self._step * 2
        lines = [
            "// Generated by Whiskers",
            "// Runtime support",
            "window.scratchRuntime = {",
        ]
        lines.extend(f"{one}{name}: {value}," for name, value in self._fields.items())
        lines.append(f"{one}postMoveHooks: [")
        lines.extend(f"{two}{hook}," for hook in self._post_move_hooks)
        lines.append(f"{one}],")
        lines.append(f"{one}spriteMethods: {{")
        for method in self._sprite_methods.values():
            lines.extend(method.render(two, one))
        lines.append(f"{one}}},")
        for method in (*self._methods.values(), INIT_METHOD):
            lines.extend(method.render(one, one))
        lines.append("};")
        lines.append("")
        return "\n".join(lines) + "\n"
